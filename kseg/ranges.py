"""Unicode code-point tables used for script classification."""

from __future__ import annotations

from typing import Sequence, Tuple

CodePointRange = Tuple[int, int]

# Inclusive (start, end) intervals.
KHMER_MAIN: CodePointRange = (0x1780, 0x17FF)
KHMER_SYMBOLS: CodePointRange = (0x19E0, 0x19FF)

BASIC_LATIN: CodePointRange = (0x0000, 0x007F)
LATIN_1_SUPPLEMENT: CodePointRange = (0x0080, 0x00FF)
LATIN_EXTENDED_A: CodePointRange = (0x0100, 0x017F)
LATIN_EXTENDED_B: CodePointRange = (0x0180, 0x024F)

KHMER_RANGES: Tuple[CodePointRange, ...] = (KHMER_MAIN, KHMER_SYMBOLS)
LATIN_RANGES: Tuple[CodePointRange, ...] = (
    BASIC_LATIN,
    LATIN_1_SUPPLEMENT,
    LATIN_EXTENDED_A,
    LATIN_EXTENDED_B,
)


def in_ranges(code_point: int, ranges: Sequence[CodePointRange]) -> bool:
    """Return True when the code point falls inside any inclusive interval."""

    for start, end in ranges:
        if start <= code_point <= end:
            return True
    return False


def is_khmer(code_point: int) -> bool:
    """Detect whether the code point belongs to the Khmer blocks."""

    return in_ranges(code_point, KHMER_RANGES)


def is_latin(code_point: int) -> bool:
    """Detect whether the code point belongs to the Latin blocks."""

    return in_ranges(code_point, LATIN_RANGES)
