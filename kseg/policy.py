"""Resilient error policy for batch segmentation runs."""

from __future__ import annotations

import sys
from typing import Callable, List, Optional

from .errors import (
    AbortRequested,
    ErrorCategory,
    ErrorRecord,
    ErrorTracker,
    NonInteractiveAbort,
)

Prompt = Callable[[str], str]


class ErrorPolicy:
    """Records errors and decides whether a run may keep going.

    Three consecutive errors of one category, or ten in total, stop a
    non-interactive run and ask an interactive user to continue or abort.
    """

    def __init__(self, *, interactive: bool, prompt: Optional[Prompt] = None) -> None:
        self.interactive = interactive
        self.prompt = prompt or input
        self.records: List[ErrorRecord] = []
        self.tracker = ErrorTracker()

    @property
    def messages(self) -> List[str]:
        return [record.message for record in self.records]

    def record_success(self) -> None:
        self.tracker.reset_consecutive()

    def handle_error(
        self,
        category: ErrorCategory,
        message: str,
        line_number: Optional[int] = None,
    ) -> None:
        """Record an error; raise when the thresholds say the run must stop."""

        self.records.append(
            ErrorRecord(category=category, message=message, line_number=line_number)
        )
        state = self.tracker.register(category)
        print(message, file=sys.stderr)

        if not state.threshold_reached:
            return

        if not self.interactive:
            raise NonInteractiveAbort(
                "Error threshold exceeded in non-interactive mode. Stopping safely."
            )

        if state.consecutive >= self.tracker.consecutive_limit:
            question = (
                f"Repeated errors detected ({state.consecutive} times). "
                "Continue or abort?"
            )
        else:
            question = f"{state.total} errors encountered. Continue or abort?"

        while True:
            response = self.prompt(f"{question} ").strip().lower()
            if response in {"continue", "c"}:
                self.tracker.reset_consecutive()
                return
            if response in {"abort", "a"}:
                raise AbortRequested("Abort requested by user.")
            print("Please respond with Continue or Abort (c/a).", file=sys.stderr)
