"""Tests for batch file segmentation."""

import json

import pytest

from kseg.errors import InputFileError, NonInteractiveAbort, OverwriteRefusedError
from kseg.runner import SegmentationRunner, format_record, validate_paths
from kseg.segmenter import segment
from kseg.structures import ScriptTag
from kseg.styling import ScriptStyle, ScriptStyleCollection, TextStyler


def _runner(input_path, output_path, output_format="text", **overrides):
    options = dict(
        input_path=input_path,
        output_path=output_path,
        output_format=output_format,
        allowed_tags=None,
        styler=TextStyler(),
        interactive=False,
        verbose=False,
        debug=False,
    )
    options.update(overrides)
    return SegmentationRunner(**options)


@pytest.fixture
def sample_file(tmp_path):
    path = tmp_path / "input.txt"
    path.write_bytes("ABកខ\n\nHello\n".encode("utf-8") + b"\xff\xfe bad\n")
    return path


def test_run_writes_json_lines(sample_file, tmp_path):
    output = tmp_path / "out.jsonl"
    summary = _runner(sample_file, output, "json").run()

    records = [json.loads(line) for line in output.read_text(encoding="utf-8").splitlines()]
    assert [record["line"] for record in records] == [1, 3]
    assert records[0]["source"] == "ABកខ"
    assert records[0]["dominant"] == "Mixed"
    assert records[0]["boundaries"] == 1
    assert records[0]["runs"][1] == {
        "tag": "Khmer",
        "text": "កខ",
        "start_index": 2,
        "end_index": 3,
    }
    assert records[1]["dominant"] == "Latin"

    assert summary.total_lines == 4
    assert summary.segmented_lines == 2
    assert summary.blank_lines == 1
    assert summary.skipped_lines == 1
    assert summary.total_runs == 3
    assert summary.runs_by_tag == {"Khmer": 1, "Latin": 2, "Other": 0}
    assert summary.dominant is ScriptTag.LATIN
    assert summary.total_errors == 1
    assert "Line 4" in summary.error_messages[0]


def test_run_writes_text_rows(tmp_path):
    source = tmp_path / "input.txt"
    source.write_text("AAក!!AA\nកខ\n", encoding="utf-8")
    output = tmp_path / "out.txt"
    _runner(source, output).run()
    assert output.read_text(encoding="utf-8") == (
        "Latin\t0\t1\tAA\n"
        "Khmer\t2\t2\tក\n"
        "Latin\t3\t6\t!!AA\n"
        "\n"
        "Khmer\t0\t1\tកខ\n"
        "\n"
    )


def test_run_filters_and_renders_html(tmp_path):
    source = tmp_path / "input.txt"
    source.write_text("AAកខAA\n", encoding="utf-8")
    output = tmp_path / "out.html"
    styler = TextStyler(ScriptStyleCollection(khmer=ScriptStyle(color="red")))
    summary = _runner(
        source,
        output,
        "html",
        allowed_tags=[ScriptTag.KHMER],
        styler=styler,
    ).run()
    assert output.read_text(encoding="utf-8") == (
        '<p><span class="kseg-khmer" style="color: red">កខ</span></p>\n'
    )
    assert summary.runs_by_tag["Khmer"] == 1
    assert summary.runs_by_tag["Latin"] == 0


def test_run_writes_to_stdout(tmp_path, capsys):
    source = tmp_path / "input.txt"
    source.write_text("Hello\n", encoding="utf-8")
    summary = _runner(source, None).run()
    assert capsys.readouterr().out == "Latin\t0\t4\tHello\n\n"
    assert summary.output_path is None


def test_run_aborts_after_repeated_decode_errors(tmp_path):
    source = tmp_path / "broken.txt"
    source.write_bytes(b"\xff\n\xfe\n\xfd\nok\n")
    with pytest.raises(NonInteractiveAbort):
        _runner(source, tmp_path / "out.txt").run()


def test_run_debug_dumps_to_stderr(tmp_path, capsys):
    source = tmp_path / "input.txt"
    source.write_text("ក\n", encoding="utf-8")
    _runner(source, tmp_path / "out.txt", debug=True).run()
    err = capsys.readouterr().err
    assert "[kseg][debug] runner.line.1:" in err
    assert '"tag": "Khmer"' in err


def test_format_record_json_keeps_filtered_source():
    line = "AAកខAA"
    record = json.loads(
        format_record(
            segment("កខ"),
            line=line,
            line_number=7,
            output_format="json",
            styler=TextStyler(),
        )
    )
    assert record["line"] == 7
    assert record["boundaries"] == 2
    assert record["dominant"] == "Latin"


def test_validate_paths(tmp_path):
    source = tmp_path / "input.txt"
    with pytest.raises(InputFileError):
        validate_paths(source, None, force_overwrite=False)

    source.write_text("x", encoding="utf-8")
    validate_paths(source, None, force_overwrite=False)

    with pytest.raises(InputFileError):
        validate_paths(tmp_path, None, force_overwrite=False)

    existing = tmp_path / "out.txt"
    existing.write_text("old", encoding="utf-8")
    with pytest.raises(OverwriteRefusedError):
        validate_paths(source, existing, force_overwrite=False)
    validate_paths(source, existing, force_overwrite=True)

    with pytest.raises(OverwriteRefusedError):
        validate_paths(source, source, force_overwrite=True)


def test_run_strips_utf8_byte_order_mark(tmp_path):
    source = tmp_path / "bom.txt"
    source.write_bytes(b"\xef\xbb\xbf" + "ABក\nCD\n".encode("utf-8"))
    output = tmp_path / "out.txt"
    summary = _runner(source, output).run()
    assert output.read_text(encoding="utf-8") == (
        "Latin\t0\t1\tAB\n"
        "Khmer\t2\t2\tក\n"
        "\n"
        "Latin\t0\t1\tCD\n"
        "\n"
    )
    assert summary.runs_by_tag["Other"] == 0


def test_fully_filtered_line_leaves_a_single_separator(tmp_path):
    source = tmp_path / "input.txt"
    source.write_text("AA\nកខ\n", encoding="utf-8")
    output = tmp_path / "out.txt"
    _runner(source, output, allowed_tags=[ScriptTag.KHMER]).run()
    assert output.read_text(encoding="utf-8") == "\nKhmer\t0\t1\tកខ\n\n"


def test_summary_counters_start_at_zero(tmp_path):
    runner = _runner(tmp_path / "unused.txt", None)
    assert runner._segmented_lines == 0
    assert runner._blank_lines == 0
    assert runner._skipped_lines == 0
    assert sum(runner._tag_counts.values()) == 0
    assert runner._decoded == []


def test_runner_can_run_twice_without_accumulating(tmp_path):
    source = tmp_path / "input.txt"
    source.write_text("Hello\n", encoding="utf-8")
    runner = _runner(source, tmp_path / "out.txt")
    runner.run()
    summary = runner.run()
    assert summary.segmented_lines == 1
    assert summary.total_runs == 1
