"""Error definitions and policy counters for kseg's outer surfaces.

The segmentation core never raises; these types belong to the file runner,
configuration loader and command line interface.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional


class ErrorCategory(Enum):
    """Categorises runtime errors to apply policy thresholds."""

    ARGUMENT = auto()
    FILE_IO = auto()
    DECODE = auto()
    OUTPUT = auto()
    OTHER = auto()


class KsegError(Exception):
    """Base exception for all custom errors."""


class AbortRequested(KsegError):
    """Raised when the user elects to abort processing."""


class NonInteractiveAbort(KsegError):
    """Raised when non-interactive policy dictates termination."""


class InputFileError(KsegError):
    """Raised when an input file is missing or cannot be read."""


class OverwriteRefusedError(KsegError):
    """Raised when attempting to overwrite an output without consent."""


class ConfigurationError(KsegError):
    """Raised when configuration sources are unreadable or invalid."""


class UsageError(KsegError):
    """Raised when command line arguments are missing or malformed."""


@dataclass
class ErrorRecord:
    """Stores context for a handled error."""

    category: ErrorCategory
    message: str
    line_number: Optional[int] = None


@dataclass
class TrackerState:
    """Counters reported back after registering an error."""

    consecutive: int
    total: int
    threshold_reached: bool


class ErrorTracker:
    """Counts consecutive same-category errors and the overall total."""

    def __init__(self, *, consecutive_limit: int = 3, total_limit: int = 10) -> None:
        self.consecutive_limit = consecutive_limit
        self.total_limit = total_limit
        self.last_category: Optional[ErrorCategory] = None
        self.consecutive = 0
        self.total = 0

    def register(self, category: ErrorCategory) -> TrackerState:
        if category == self.last_category:
            self.consecutive += 1
        else:
            self.last_category = category
            self.consecutive = 1
        self.total += 1
        return TrackerState(
            consecutive=self.consecutive,
            total=self.total,
            threshold_reached=(
                self.consecutive >= self.consecutive_limit
                or self.total >= self.total_limit
            ),
        )

    def reset_consecutive(self) -> None:
        """Forget the current streak after a line is processed cleanly."""

        self.consecutive = 0
        self.last_category = None
