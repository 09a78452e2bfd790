"""Tests for the code-point range tables."""

import pytest

from kseg.ranges import (
    BASIC_LATIN,
    KHMER_MAIN,
    KHMER_RANGES,
    KHMER_SYMBOLS,
    LATIN_EXTENDED_B,
    LATIN_RANGES,
    in_ranges,
    is_khmer,
    is_latin,
)


@pytest.mark.parametrize(
    "code_point, expected",
    [
        (0x1780, True),
        (0x17FF, True),
        (0x19E0, True),
        (0x19FF, True),
        (0x177F, False),
        (0x1800, False),
        (0x19DF, False),
        (0x1A00, False),
        (-1, False),
        (0x110000, False),
    ],
)
def test_is_khmer_bounds(code_point, expected):
    assert is_khmer(code_point) is expected


@pytest.mark.parametrize(
    "code_point, expected",
    [
        (0x0000, True),
        (ord("A"), True),
        (ord("!"), True),
        (0x00E9, True),
        (0x017F, True),
        (0x024F, True),
        (0x0250, False),
        (0x1780, False),
        (-5, False),
    ],
)
def test_is_latin_bounds(code_point, expected):
    assert is_latin(code_point) is expected


def test_tables_are_named_inclusive_intervals():
    assert KHMER_RANGES == (KHMER_MAIN, KHMER_SYMBOLS)
    assert LATIN_RANGES[0] == BASIC_LATIN
    assert LATIN_RANGES[-1] == LATIN_EXTENDED_B
    for start, end in KHMER_RANGES + LATIN_RANGES:
        assert start <= end


def test_khmer_and_latin_tables_do_not_overlap():
    for k_start, k_end in KHMER_RANGES:
        for l_start, l_end in LATIN_RANGES:
            assert k_end < l_start or l_end < k_start


def test_in_ranges_accepts_custom_tables():
    thai = ((0x0E00, 0x0E7F),)
    assert in_ranges(0x0E01, thai)
    assert not in_ranges(0x0E80, thai)
