"""Core data structures for script segmentation."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterator, List, Tuple


class ScriptTag(Enum):
    """Script classification of a character, a run, or a whole string."""

    KHMER = "Khmer"
    LATIN = "Latin"
    OTHER = "Other"
    # Aggregate analysis result only, never assigned to a character or run.
    MIXED = "Mixed"

    @classmethod
    def parse(cls, name: str) -> "ScriptTag":
        """Look up a tag by name, ignoring case and surrounding whitespace."""

        normalized = name.strip().lower()
        for tag in cls:
            if tag.value.lower() == normalized:
                return tag
        known = ", ".join(tag.value for tag in cls)
        raise ValueError(f"Unknown script tag '{name}' (known: {known}).")


RUN_TAGS: Tuple[ScriptTag, ...] = (ScriptTag.KHMER, ScriptTag.LATIN, ScriptTag.OTHER)


@dataclass(frozen=True)
class ClassifiedRun:
    """A maximal stretch of text sharing one script tag.

    ``start_index`` and ``end_index`` are inclusive code-point offsets into
    the string the run was segmented from.
    """

    tag: ScriptTag
    text: str
    start_index: int
    end_index: int

    def __post_init__(self) -> None:
        if self.tag is ScriptTag.MIXED:
            raise ValueError("A run cannot be tagged Mixed.")
        if self.start_index > self.end_index:
            raise ValueError(
                f"Run start {self.start_index} is after its end {self.end_index}."
            )

    @property
    def length(self) -> int:
        return len(self.text)

    @property
    def is_khmer(self) -> bool:
        return self.tag is ScriptTag.KHMER

    @property
    def is_latin(self) -> bool:
        return self.tag is ScriptTag.LATIN

    @property
    def is_other(self) -> bool:
        return self.tag is ScriptTag.OTHER

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tag": self.tag.value,
            "text": self.text,
            "start_index": self.start_index,
            "end_index": self.end_index,
        }


@dataclass(frozen=True)
class Boundary:
    """Index span and tag of a run, without its text."""

    start_index: int
    end_index: int
    tag: ScriptTag


@dataclass(frozen=True)
class SegmentedText:
    """A source string together with its ordered, contiguous script runs.

    Instances built by the segmenter satisfy: runs ascend by ``start_index``,
    adjacent runs touch (``end_index + 1 == next.start_index``), no two
    adjacent runs share a tag, and joining the run texts yields ``source``.
    Filtered or mapped instances keep the original run indices, which then
    no longer index into their own ``source``.
    """

    source: str
    runs: Tuple[ClassifiedRun, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.runs)

    def __iter__(self) -> Iterator[ClassifiedRun]:
        return iter(self.runs)

    def __getitem__(self, index: int) -> ClassifiedRun:
        return self.runs[index]

    @property
    def run_count(self) -> int:
        return len(self.runs)

    @property
    def length(self) -> int:
        return len(self.source)

    @property
    def contains_khmer(self) -> bool:
        return any(run.is_khmer for run in self.runs)

    @property
    def contains_latin(self) -> bool:
        return any(run.is_latin for run in self.runs)

    @property
    def is_mixed(self) -> bool:
        return self.contains_khmer and self.contains_latin

    @property
    def khmer_runs(self) -> List[ClassifiedRun]:
        return [run for run in self.runs if run.is_khmer]

    @property
    def latin_runs(self) -> List[ClassifiedRun]:
        return [run for run in self.runs if run.is_latin]

    @property
    def other_runs(self) -> List[ClassifiedRun]:
        return [run for run in self.runs if run.is_other]

    def texts(self) -> List[str]:
        return [run.text for run in self.runs]

    def map(self, transform: Callable[[ClassifiedRun], str]) -> "SegmentedText":
        """Return a new instance with each run's text replaced by ``transform(run)``.

        Tags and indices are carried over unchanged and are not re-classified;
        the new ``source`` is the join of the transformed texts.
        """

        mapped = tuple(
            ClassifiedRun(
                tag=run.tag,
                text=transform(run),
                start_index=run.start_index,
                end_index=run.end_index,
            )
            for run in self.runs
        )
        return SegmentedText(
            source="".join(run.text for run in mapped),
            runs=mapped,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source,
            "runs": [run.to_dict() for run in self.runs],
        }
