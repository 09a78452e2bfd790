"""Prepper-backed settings for fonts, colours and output format.

Sources are read lowest to highest precedence: discovered ``kseg`` YAML
files, a ``.env`` file in the application directory, then the process
environment. Every option has a default, so no source is required.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterator, Literal, Mapping

from dotenv import dotenv_values
from prepper import (
    Field,
    IoError,
    SchemaError,
    SchemaModel,
    ValidationError,
    model_validator,
)
from prepper.loaders import _parse_file, discover_file_paths
from prepper.provenance import ProvenanceRecorder

from .errors import ConfigurationError

APP_NAME = "kseg"
OUTPUT_FORMATS = ("text", "json", "html")
FORMAT_ALIASES = {"jsonl": "json", "txt": "text", "htm": "html"}


class KsegConfig(SchemaModel):
    """Schema describing all supported configuration options."""

    KSEG_KHMER_FONT: str | None = Field(
        default="Battambang",
        description="Font family applied to Khmer runs.",
    )
    KSEG_KHMER_FONT_SIZE: float | None = Field(default=None)
    KSEG_KHMER_COLOR: str | None = Field(default=None)
    KSEG_LATIN_FONT: str | None = Field(
        default="Roboto",
        description="Font family applied to Latin and unclassified runs.",
    )
    KSEG_LATIN_FONT_SIZE: float | None = Field(default=None)
    KSEG_LATIN_COLOR: str | None = Field(default=None)
    KSEG_DEFAULT_FONT_SIZE: float | None = Field(default=None)
    KSEG_OUTPUT_FORMAT: Literal["text", "json", "html"] = Field(
        default="text",
        description="Output format used when the command line does not choose one.",
    )
    KSEG_DEBUG: bool = Field(default=False)

    @model_validator(mode="before")
    def _normalise_output_format(data: Any) -> Any:
        if isinstance(data, dict):
            value = data.get("KSEG_OUTPUT_FORMAT")
            if isinstance(value, str):
                value = value.strip().lower()
                value = FORMAT_ALIASES.get(value, value)
                data["KSEG_OUTPUT_FORMAT"] = value if value in OUTPUT_FORMATS else "text"
        return data


def option_names() -> frozenset[str]:
    return frozenset(KsegConfig.__field_infos__)


def _iter_sources(app_dir: Path) -> Iterator[Mapping[str, Any]]:
    """Yield raw option mappings, lowest precedence first."""

    discovered = discover_file_paths(APP_NAME, "yaml", app_dir=app_dir, extra_paths=None)
    for path, _label in discovered:
        parsed = _parse_file(path, "yaml")
        if not isinstance(parsed, Mapping):
            raise IoError(f"{path}: expected a mapping at the root.")
        yield parsed

    dotenv_path = app_dir / ".env"
    if dotenv_path.exists():
        yield dotenv_values(dotenv_path)

    yield os.environ


@lru_cache(maxsize=1)
def _load_settings(app_dir: Path) -> KsegConfig:
    names = option_names()
    combined: Dict[str, Any] = {}
    try:
        for source in _iter_sources(app_dir):
            combined.update(
                (key, value)
                for key, value in source.items()
                if key in names and value is not None
            )
        return KsegConfig.validate(combined, provenance=ProvenanceRecorder())
    except IoError as exc:
        raise ConfigurationError(f"Configuration files could not be read: {exc}") from exc
    except SchemaError as exc:
        raise ConfigurationError(f"Configuration schema error: {exc}") from exc
    except ValidationError as exc:
        raise ConfigurationError(_describe_validation_error(exc)) from exc


def _describe_validation_error(exc: ValidationError) -> str:
    lines = ["Configuration validation errors detected:"]
    for entry in exc.to_dict():
        path = entry.get("path") or []
        if isinstance(path, (list, tuple)):
            option = ".".join(str(part) for part in path if part)
        else:
            option = str(path)
        message = entry.get("message") or entry.get("msg") or "Invalid value"
        lines.append(f"- {option or 'settings'}: {message}")
    return "\n".join(lines)


def get_settings(app_dir: Path | None = None) -> KsegConfig:
    """Return the validated settings, loading them on first use."""

    return _load_settings(app_dir or Path.cwd())


def clear_cache() -> None:
    """Drop the cached settings so the next call reloads every source."""

    _load_settings.cache_clear()
