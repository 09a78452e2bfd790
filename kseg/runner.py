"""Batch segmentation of text files."""

from __future__ import annotations

import codecs
import json
import pathlib
import sys
import time
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, TextIO

from .classifier import analyze_dominant
from .errors import ErrorCategory, InputFileError, KsegError, OverwriteRefusedError
from .policy import ErrorPolicy, Prompt
from .segmenter import count_boundaries, filter_by_tags, segment
from .structures import RUN_TAGS, ScriptTag, SegmentedText
from .styling import TextStyler


@dataclass
class SegmentationSummary:
    """Report returned after processing a file."""

    input_path: pathlib.Path
    output_path: pathlib.Path | None
    output_format: str
    total_lines: int
    segmented_lines: int
    blank_lines: int
    skipped_lines: int
    total_runs: int
    runs_by_tag: Dict[str, int]
    dominant: ScriptTag
    total_errors: int
    elapsed_seconds: float
    error_messages: List[str] = field(default_factory=list)


def log_debug(label: str, payload: Any, *, enabled: bool) -> None:
    """Emit structured debug information when enabled."""

    if not enabled:
        return
    try:
        if isinstance(payload, (dict, list)):
            message = json.dumps(payload, ensure_ascii=False, indent=2)
        else:
            message = str(payload)
    except (TypeError, ValueError):
        message = repr(payload)
    print(f"[kseg][debug] {label}:\n{message}", file=sys.stderr)


def format_record(
    segmented: SegmentedText,
    *,
    line: str,
    line_number: int,
    output_format: str,
    styler: TextStyler,
) -> str:
    """Render one segmented input line in the requested output format."""

    if output_format == "json":
        record = {
            "line": line_number,
            "source": segmented.source,
            "dominant": analyze_dominant(line).value,
            "boundaries": count_boundaries(line),
            "runs": [run.to_dict() for run in segmented],
        }
        return json.dumps(record, ensure_ascii=False)
    if output_format == "html":
        return f"<p>{styler.render_html(segmented)}</p>"
    rows = [
        f"{run.tag.value}\t{run.start_index}\t{run.end_index}\t{run.text}"
        for run in segmented
    ]
    if not rows:
        return ""
    return "\n".join(rows) + "\n"


def validate_paths(
    input_path: pathlib.Path,
    output_path: pathlib.Path | None,
    *,
    force_overwrite: bool,
) -> None:
    if not input_path.exists():
        raise InputFileError(f"Input file not found: {input_path}")
    if not input_path.is_file():
        raise InputFileError(f"Input path is not a file: {input_path}")
    if output_path is None:
        return
    if output_path.resolve() == input_path.resolve():
        raise OverwriteRefusedError("Output path must differ from the input file.")
    if output_path.exists() and not force_overwrite:
        raise OverwriteRefusedError(
            f"Output file {output_path} already exists. Use --force to overwrite."
        )


class SegmentationRunner:
    """Reads a file line by line, segments each line and writes the records."""

    def __init__(
        self,
        *,
        input_path: pathlib.Path,
        output_path: pathlib.Path | None,
        output_format: str,
        allowed_tags: Optional[Sequence[ScriptTag]],
        styler: TextStyler,
        interactive: bool,
        verbose: bool,
        debug: bool,
        prompt: Optional[Prompt] = None,
    ) -> None:
        self.input_path = input_path
        self.output_path = output_path
        self.output_format = output_format
        self.allowed_tags = tuple(allowed_tags) if allowed_tags else None
        self.styler = styler
        self.verbose = verbose
        self.debug = debug

        self.error_policy = ErrorPolicy(interactive=interactive, prompt=prompt)
        self._reset_counters()

    def _reset_counters(self) -> None:
        self._segmented_lines = 0
        self._blank_lines = 0
        self._skipped_lines = 0
        self._tag_counts: Counter[ScriptTag] = Counter()
        self._decoded: List[str] = []

    def run(self) -> SegmentationSummary:
        start_time = time.time()

        try:
            raw_lines = self.input_path.read_bytes().splitlines()
        except OSError as exc:
            raise InputFileError(
                f"Could not read input file {self.input_path}: {exc}"
            ) from exc

        if raw_lines and raw_lines[0].startswith(codecs.BOM_UTF8):
            raw_lines[0] = raw_lines[0][len(codecs.BOM_UTF8):]

        if self.verbose:
            print(f"Read {len(raw_lines)} lines from {self.input_path}.", file=sys.stderr)

        if self.output_path is None:
            self._process(raw_lines, sys.stdout)
        else:
            try:
                with self.output_path.open("w", encoding="utf-8") as handle:
                    self._process(raw_lines, handle)
            except OSError as exc:
                raise KsegError(
                    f"Could not write output file {self.output_path}: {exc}"
                ) from exc

        elapsed = time.time() - start_time
        summary = SegmentationSummary(
            input_path=self.input_path,
            output_path=self.output_path,
            output_format=self.output_format,
            total_lines=len(raw_lines),
            segmented_lines=self._segmented_lines,
            blank_lines=self._blank_lines,
            skipped_lines=self._skipped_lines,
            total_runs=sum(self._tag_counts.values()),
            runs_by_tag={tag.value: self._tag_counts[tag] for tag in RUN_TAGS},
            dominant=analyze_dominant("".join(self._decoded)),
            total_errors=len(self.error_policy.records),
            elapsed_seconds=elapsed,
            error_messages=self.error_policy.messages,
        )
        log_debug("runner.summary.runs_by_tag", summary.runs_by_tag, enabled=self.debug)
        return summary

    def _process(self, raw_lines: Iterable[bytes], handle: TextIO) -> None:
        self._reset_counters()

        for line_number, raw in enumerate(raw_lines, start=1):
            try:
                line = raw.decode("utf-8")
            except UnicodeDecodeError as exc:
                self._skipped_lines += 1
                self.error_policy.handle_error(
                    ErrorCategory.DECODE,
                    f"Line {line_number} is not valid UTF-8 ({exc.reason}). "
                    "Skipping this line.",
                    line_number=line_number,
                )
                continue

            self.error_policy.record_success()
            if not line:
                self._blank_lines += 1
                continue

            self._decoded.append(line)
            if self.allowed_tags is None:
                segmented = segment(line)
            else:
                segmented = filter_by_tags(line, self.allowed_tags)
            log_debug(
                f"runner.line.{line_number}", segmented.to_dict(), enabled=self.debug
            )
            self._tag_counts.update(run.tag for run in segmented)
            self._segmented_lines += 1
            handle.write(
                format_record(
                    segmented,
                    line=line,
                    line_number=line_number,
                    output_format=self.output_format,
                    styler=self.styler,
                )
                + "\n"
            )
