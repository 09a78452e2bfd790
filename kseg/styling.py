"""Per-script style resolution and rich-text assembly for segmented text."""

from __future__ import annotations

import html
from dataclasses import dataclass, field, fields, replace
from typing import Any, List, Optional

from .segmenter import segment
from .structures import ScriptTag, SegmentedText

# Style field name -> CSS property name.
CSS_PROPERTIES = {
    "font_family": "font-family",
    "font_size": "font-size",
    "font_weight": "font-weight",
    "font_style": "font-style",
    "color": "color",
    "background_color": "background-color",
    "letter_spacing": "letter-spacing",
    "word_spacing": "word-spacing",
    "line_height": "line-height",
    "decoration": "text-decoration",
}

_LENGTH_FIELDS = {"font_size", "letter_spacing", "word_spacing"}


def _css_value(name: str, value: Any) -> str:
    if name in _LENGTH_FIELDS and isinstance(value, (int, float)):
        return f"{value:g}px"
    if name == "font_family":
        return f"'{value}'"
    if isinstance(value, float):
        return f"{value:g}"
    return str(value)


@dataclass(frozen=True)
class ScriptStyle:
    """Opaque style descriptor; unset fields are ``None``."""

    font_family: Optional[str] = None
    font_size: Optional[float] = None
    font_weight: Optional[str] = None
    font_style: Optional[str] = None
    color: Optional[str] = None
    background_color: Optional[str] = None
    letter_spacing: Optional[float] = None
    word_spacing: Optional[float] = None
    line_height: Optional[float] = None
    decoration: Optional[str] = None

    def merge(self, other: Optional["ScriptStyle"]) -> "ScriptStyle":
        """Return a style where the other style's set fields take precedence."""

        if other is None:
            return self
        changes = {
            item.name: getattr(other, item.name)
            for item in fields(other)
            if getattr(other, item.name) is not None
        }
        return replace(self, **changes)

    def copy_with(self, **changes: Any) -> "ScriptStyle":
        return replace(self, **changes)

    def is_empty(self) -> bool:
        return all(getattr(self, item.name) is None for item in fields(self))

    def to_css(self) -> str:
        """Render the set fields as a CSS declaration list."""

        declarations: List[str] = []
        for item in fields(self):
            value = getattr(self, item.name)
            if value is None:
                continue
            css_value = _css_value(item.name, value)
            declarations.append(f"{CSS_PROPERTIES[item.name]}: {css_value}")
        return "; ".join(declarations)


@dataclass(frozen=True)
class ScriptStyleCollection:
    """Maps script tags to styles, layered over a shared default."""

    khmer: ScriptStyle = field(default_factory=ScriptStyle)
    latin: ScriptStyle = field(default_factory=ScriptStyle)
    other: ScriptStyle = field(default_factory=ScriptStyle)
    default: ScriptStyle = field(default_factory=ScriptStyle)

    def style_for(self, tag: ScriptTag) -> ScriptStyle:
        if tag is ScriptTag.KHMER:
            return self.default.merge(self.khmer)
        if tag is ScriptTag.LATIN:
            return self.default.merge(self.latin)
        if tag is ScriptTag.OTHER:
            return self.default.merge(self.other)
        return self.default

    def copy_with(self, **changes: ScriptStyle) -> "ScriptStyleCollection":
        return replace(self, **changes)


@dataclass(frozen=True)
class StyledSpan:
    """A run's text paired with its resolved style."""

    text: str
    tag: ScriptTag
    style: ScriptStyle


class TextStyler:
    """Resolves styles for segmented text and assembles rich text."""

    def __init__(self, styles: Optional[ScriptStyleCollection] = None) -> None:
        self.styles = styles or ScriptStyleCollection()

    @classmethod
    def from_settings(cls, settings: Any) -> "TextStyler":
        """Build a styler from loaded configuration settings.

        Runs tagged Other borrow the Latin style.
        """

        khmer = ScriptStyle(
            font_family=settings.KSEG_KHMER_FONT,
            font_size=settings.KSEG_KHMER_FONT_SIZE,
            color=settings.KSEG_KHMER_COLOR,
        )
        latin = ScriptStyle(
            font_family=settings.KSEG_LATIN_FONT,
            font_size=settings.KSEG_LATIN_FONT_SIZE,
            color=settings.KSEG_LATIN_COLOR,
        )
        default = ScriptStyle(font_size=settings.KSEG_DEFAULT_FONT_SIZE)
        return cls(
            ScriptStyleCollection(
                khmer=khmer,
                latin=latin,
                other=latin,
                default=default,
            )
        )

    def create_spans(self, segmented: SegmentedText) -> List[StyledSpan]:
        return [
            StyledSpan(
                text=run.text,
                tag=run.tag,
                style=self.styles.style_for(run.tag),
            )
            for run in segmented
        ]

    def style_text(self, text: str) -> List[StyledSpan]:
        return self.create_spans(segment(text))

    def render_html(self, segmented: SegmentedText) -> str:
        """Render one ``<span>`` per run with inline CSS and escaped text."""

        parts: List[str] = []
        for span in self.create_spans(segmented):
            css = span.style.to_css()
            style_attr = f' style="{html.escape(css)}"' if css else ""
            parts.append(
                f'<span class="kseg-{span.tag.value.lower()}"{style_attr}>'
                f"{html.escape(span.text, quote=False)}</span>"
            )
        return "".join(parts)

    def style_text_as_html(self, text: str) -> str:
        return self.render_html(segment(text))

    def copy_with(
        self, *, styles: Optional[ScriptStyleCollection] = None
    ) -> "TextStyler":
        return TextStyler(styles or self.styles)
