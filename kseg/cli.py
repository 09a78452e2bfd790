"""Command line interface for the kseg script segmenter."""

from __future__ import annotations

import argparse
import pathlib
import sys
from typing import Iterable, List, NoReturn, Optional, Sequence

from .classifier import analyze_dominant
from .configuration import OUTPUT_FORMATS, get_settings
from .errors import (
    AbortRequested,
    ConfigurationError,
    InputFileError,
    KsegError,
    NonInteractiveAbort,
    OverwriteRefusedError,
    UsageError,
)
from .runner import (
    SegmentationRunner,
    SegmentationSummary,
    format_record,
    log_debug,
    validate_paths,
)
from .segmenter import count_boundaries, filter_by_tags, group_by_tag, segment
from .structures import ScriptTag
from .styling import TextStyler


def _script_tag(value: str) -> ScriptTag:
    try:
        tag = ScriptTag.parse(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc
    if tag is ScriptTag.MIXED:
        raise argparse.ArgumentTypeError("Runs are never tagged Mixed.")
    return tag


class KsegArgumentParser(argparse.ArgumentParser):
    """Argument parser that reports usage errors as exit code 1."""

    def error(self, message: str) -> NoReturn:
        raise UsageError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = KsegArgumentParser(
        prog="kseg",
        description="Split mixed Khmer/Latin text into runs of one script.",
    )
    parser.add_argument(
        "text",
        nargs="?",
        help="Inline text to segment. Ignored when --input is given.",
    )
    parser.add_argument(
        "-i",
        "--input",
        help="UTF-8 text file to segment line by line.",
    )
    parser.add_argument(
        "-o",
        "--output",
        help="Output file path for --input mode. Defaults to standard output.",
    )
    parser.add_argument(
        "--format",
        choices=OUTPUT_FORMATS,
        help="Output format (default: KSEG_OUTPUT_FORMAT or text).",
    )
    parser.add_argument(
        "--only",
        nargs="+",
        type=_script_tag,
        metavar="TAG",
        help="Keep only runs with these tags (Khmer, Latin, Other).",
    )
    parser.add_argument(
        "--dominant",
        action="store_true",
        help="Print the dominant script of the inline text.",
    )
    parser.add_argument(
        "--boundaries",
        action="store_true",
        help="Print the number of script transitions in the inline text.",
    )
    parser.add_argument(
        "--group",
        action="store_true",
        help="Print the inline text's runs grouped by script.",
    )
    parser.add_argument(
        "-f",
        "--force",
        action="store_true",
        help="Allow overwriting the output file if it already exists.",
    )
    parser.add_argument(
        "--non-interactive",
        action="store_true",
        help="Disable prompts and stop automatically on repeated errors.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show progress information.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Dump segmentation results to standard error.",
    )
    return parser


def execute_file(
    *,
    input_file: str,
    output_file: str | None,
    output_format: str,
    allowed_tags: Optional[Sequence[ScriptTag]],
    styler: TextStyler,
    force_overwrite: bool,
    non_interactive: bool,
    verbose: bool,
    debug: bool,
) -> tuple[int, SegmentationSummary | None, str | None]:
    """Segment a file and return the exit code, summary, and message."""

    input_path = pathlib.Path(input_file).expanduser().resolve()
    output_path = (
        pathlib.Path(output_file).expanduser().resolve() if output_file else None
    )

    try:
        validate_paths(input_path, output_path, force_overwrite=force_overwrite)
    except (InputFileError, OverwriteRefusedError) as exc:
        return 1, None, str(exc)

    if output_path is not None:
        output_path.parent.mkdir(parents=True, exist_ok=True)

    runner = SegmentationRunner(
        input_path=input_path,
        output_path=output_path,
        output_format=output_format,
        allowed_tags=allowed_tags,
        styler=styler,
        interactive=not non_interactive,
        verbose=verbose,
        debug=debug,
    )

    try:
        summary = runner.run()
    except NonInteractiveAbort as exc:
        return 2, None, str(exc)
    except AbortRequested:
        return 2, None, "Segmentation aborted at your request."
    except KsegError as exc:
        return 1, None, str(exc)
    except KeyboardInterrupt:
        return 2, None, "Segmentation interrupted by user."

    return 0, summary, None


def render_inline(
    text: str,
    *,
    output_format: str,
    allowed_tags: Optional[Sequence[ScriptTag]],
    styler: TextStyler,
    show_dominant: bool,
    show_boundaries: bool,
    show_groups: bool,
) -> List[str]:
    """Build the output lines for a single inline string."""

    lines: List[str] = []
    if show_dominant:
        lines.append(f"Dominant script: {analyze_dominant(text).value}")
    if show_boundaries:
        lines.append(f"Script boundaries: {count_boundaries(text)}")
    if show_groups:
        for tag, runs in group_by_tag(text).items():
            texts = ", ".join(repr(run.text) for run in runs)
            lines.append(f"{tag.value}: {texts}")
    if lines:
        return lines

    segmented = segment(text) if not allowed_tags else filter_by_tags(text, allowed_tags)
    record = format_record(
        segmented,
        line=text,
        line_number=1,
        output_format=output_format,
        styler=styler,
    )
    return [record.rstrip("\n")]


def print_summary(summary: SegmentationSummary) -> None:
    """Output a friendly report once processing completes."""

    print("\nSegmentation complete.")
    print(f"  Input file:      {summary.input_path}")
    print(f"  Output:          {summary.output_path or '<stdout>'}")
    print(f"  Format:          {summary.output_format}")
    print(
        "  Lines:           "
        f"{summary.segmented_lines} segmented / {summary.total_lines} total "
        f"({summary.blank_lines} blank, {summary.skipped_lines} skipped)"
    )
    per_tag = ", ".join(f"{tag} {count}" for tag, count in summary.runs_by_tag.items())
    print(f"  Runs:            {summary.total_runs} ({per_tag})")
    print(f"  Dominant script: {summary.dominant.value}")
    print(f"  Elapsed time:    {summary.elapsed_seconds:.2f} seconds")
    if summary.total_errors:
        print("  Notes:")
        for message in summary.error_messages:
            print(f"    - {message}")


def main(argv: Optional[Iterable[str]] = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(list(argv) if argv is not None else None)
        if args.input is None and args.text is None:
            raise UsageError("provide inline text or -i/--input")
    except UsageError as exc:
        parser.print_usage(sys.stderr)
        print(f"{parser.prog}: error: {exc}", file=sys.stderr)
        return 1

    try:
        settings = get_settings()
    except ConfigurationError as exc:
        print(exc)
        return 1

    debug = bool(args.debug or settings.KSEG_DEBUG)
    output_format = args.format or settings.KSEG_OUTPUT_FORMAT
    styler = TextStyler.from_settings(settings)

    if args.input is None:
        log_debug("cli.inline.segmented", segment(args.text).to_dict(), enabled=debug)
        for line in render_inline(
            args.text,
            output_format=output_format,
            allowed_tags=args.only,
            styler=styler,
            show_dominant=args.dominant,
            show_boundaries=args.boundaries,
            show_groups=args.group,
        ):
            print(line)
        return 0

    exit_code, summary, message = execute_file(
        input_file=args.input,
        output_file=args.output,
        output_format=output_format,
        allowed_tags=args.only,
        styler=styler,
        force_overwrite=args.force,
        non_interactive=args.non_interactive,
        verbose=args.verbose,
        debug=debug,
    )

    if message:
        print(message)
    if summary and (args.verbose or summary.output_path is not None):
        print_summary(summary)
    return exit_code


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
