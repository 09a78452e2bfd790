"""Script-boundary segmentation and derived queries."""

from __future__ import annotations

from typing import Dict, Iterable, List, Sequence

from .classifier import classify_char, contains_mixed
from .structures import RUN_TAGS, Boundary, ClassifiedRun, ScriptTag, SegmentedText


def segment(text: str) -> SegmentedText:
    """Split text into maximal runs of one script tag in a single pass."""

    if not text:
        return SegmentedText(source="", runs=())

    runs: List[ClassifiedRun] = []
    start = 0
    current = classify_char(text[0])
    for index in range(1, len(text)):
        tag = classify_char(text[index])
        if tag is current:
            continue
        runs.append(
            ClassifiedRun(
                tag=current,
                text=text[start:index],
                start_index=start,
                end_index=index - 1,
            )
        )
        start = index
        current = tag

    runs.append(
        ClassifiedRun(
            tag=current,
            text=text[start:],
            start_index=start,
            end_index=len(text) - 1,
        )
    )
    return SegmentedText(source=text, runs=tuple(runs))


def segment_all(texts: Iterable[str]) -> List[SegmentedText]:
    return [segment(text) for text in texts]


def segment_to_strings(text: str) -> List[str]:
    """Return only the run texts, in order."""

    return segment(text).texts()


def identify_boundaries(text: str) -> List[Boundary]:
    """Return the index span and tag of every run."""

    return [
        Boundary(start_index=run.start_index, end_index=run.end_index, tag=run.tag)
        for run in segment(text)
    ]


def filter_by_tags(text: str, allowed_tags: Iterable[ScriptTag]) -> SegmentedText:
    """Keep only runs whose tag is allowed and rejoin them into a new source.

    Kept runs retain their indices from the unfiltered text, so they do not
    index into the filtered source.
    """

    allowed = frozenset(allowed_tags)
    kept = tuple(run for run in segment(text) if run.tag in allowed)
    return SegmentedText(source="".join(run.text for run in kept), runs=kept)


def extract(text: str, tag: ScriptTag) -> SegmentedText:
    return filter_by_tags(text, (tag,))


def extract_khmer(text: str) -> SegmentedText:
    return extract(text, ScriptTag.KHMER)


def extract_latin(text: str) -> SegmentedText:
    return extract(text, ScriptTag.LATIN)


def group_by_tag(text: str) -> Dict[ScriptTag, List[ClassifiedRun]]:
    """Partition runs by tag, keeping their relative order.

    The mapping always holds an entry for Khmer, Latin and Other and never
    one for Mixed.
    """

    groups: Dict[ScriptTag, List[ClassifiedRun]] = {tag: [] for tag in RUN_TAGS}
    for run in segment(text):
        groups[run.tag].append(run)
    return groups


def count_boundaries(text: str) -> int:
    """Number of script transitions in the text."""

    return max(segment(text).run_count - 1, 0)


def has_mixed_scripts(text: str) -> bool:
    return contains_mixed(text)


class Segmenter:
    """Entry point for consumers that segment and query text."""

    def segment(self, text: str) -> SegmentedText:
        return segment(text)

    def segment_all(self, texts: Iterable[str]) -> List[SegmentedText]:
        return segment_all(texts)

    def filter_by_tags(
        self, text: str, allowed_tags: Sequence[ScriptTag]
    ) -> SegmentedText:
        return filter_by_tags(text, allowed_tags)

    def extract(self, text: str, tag: ScriptTag) -> SegmentedText:
        return extract(text, tag)

    def group_by_tag(self, text: str) -> Dict[ScriptTag, List[ClassifiedRun]]:
        return group_by_tag(text)

    def count_boundaries(self, text: str) -> int:
        return count_boundaries(text)

    def has_mixed_scripts(self, text: str) -> bool:
        return has_mixed_scripts(text)

    def extract_khmer(self, text: str) -> SegmentedText:
        return extract_khmer(text)

    def extract_latin(self, text: str) -> SegmentedText:
        return extract_latin(text)

    def segment_to_strings(self, text: str) -> List[str]:
        return segment_to_strings(text)

    def identify_boundaries(self, text: str) -> List[Boundary]:
        return identify_boundaries(text)
