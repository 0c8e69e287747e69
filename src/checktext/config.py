"""Configuration models and enums for checktext.

Single source of truth for truncation defaults, measurement units, and the
settings loader used by the CLI.
"""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, field_validator

if TYPE_CHECKING:
    from checktext.document import TextDocument, TextDocumentBuilder


class LogLevel(str, Enum):
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class Measure(str, Enum):
    """Accounting unit used when sizing text against a budget."""

    BYTES = "bytes"
    CHARS = "chars"

    def size(self, text: str) -> int:
        if self is Measure.BYTES:
            return len(text.encode("utf-8"))
        return len(text)


class TruncateDirection(str, Enum):
    END = "end"
    START = "start"


class ChunkMode(str, Enum):
    VERBATIM = "verbatim"
    LINES = "lines"


DEFAULT_TRUNCATION_TEXT = "Output truncated."
DEFAULT_MAX_SIZE = 65_535


class Settings(BaseModel):
    """Resolved truncation settings."""

    model_config = ConfigDict(frozen=True, validate_default=True, extra="forbid")

    truncation_text: str = DEFAULT_TRUNCATION_TEXT
    max_size: int = DEFAULT_MAX_SIZE
    measure: Measure = Measure.BYTES
    direction: TruncateDirection = TruncateDirection.END
    chunk_mode: ChunkMode = ChunkMode.VERBATIM
    log_level: LogLevel = LogLevel.WARNING

    @field_validator("truncation_text")
    @classmethod
    def _validate_truncation_text(cls, value: str) -> str:
        if not value:
            raise ValueError("truncation_text cannot be empty")
        return value

    @field_validator("max_size")
    @classmethod
    def _validate_max_size(cls, value: int) -> int:
        if value < 1:
            raise ValueError("max_size must be positive")
        return value

    def builder(self) -> TextDocumentBuilder:
        """Return a document builder preconfigured from these settings."""

        from checktext.document import TextDocumentBuilder

        builder = TextDocumentBuilder().with_truncation_text(self.truncation_text)
        if self.direction is TruncateDirection.START:
            builder.set_truncate_start()
        if self.chunk_mode is ChunkMode.LINES:
            builder.set_chunk_on_newlines()
        return builder

    def render(self, document: TextDocument) -> str:
        return document.build(self.max_size, self.measure)


def checktext_home() -> Path:
    """Return the directory holding config.toml, $CHECKTEXT_HOME or ~/.checktext."""

    override = os.environ.get("CHECKTEXT_HOME")
    return Path(override).expanduser() if override else Path.home() / ".checktext"


def default_config_path() -> Path:
    return checktext_home() / "config.toml"


def load_settings(
    cli_overrides: Mapping[str, Any] | None = None,
    env: Mapping[str, str] | None = None,
    config_path: Path | str | None = None,
) -> Settings:
    env = os.environ if env is None else env
    cli_overrides = cli_overrides or {}
    path = Path(config_path) if config_path else default_config_path()

    config_data: dict[str, Any] = {}
    if path.exists():
        config_data = _read_toml(path)

    defaults = Settings()

    truncation_text = _first_value(
        _clean_marker(cli_overrides.get("truncation_text")),
        _clean_marker(env.get("CHECKTEXT_MARKER")),
        _clean_marker(_get_config_value(config_data, "truncation", "marker")),
        defaults.truncation_text,
    )

    max_size = _first_value(
        cli_overrides.get("max_size"),
        _clean_str(env.get("CHECKTEXT_MAX_SIZE")),
        _get_config_value(config_data, "truncation", "max_size"),
        defaults.max_size,
    )

    measure = _first_value(
        _clean_str(cli_overrides.get("measure")),
        _clean_str(env.get("CHECKTEXT_MEASURE")),
        _clean_str(_get_config_value(config_data, "truncation", "measure")),
        defaults.measure,
    )

    direction = _first_value(
        _clean_str(cli_overrides.get("direction")),
        _clean_str(_get_config_value(config_data, "truncation", "direction")),
        defaults.direction,
    )

    chunk_mode = _first_value(
        _clean_str(cli_overrides.get("chunk_mode")),
        _clean_str(_get_config_value(config_data, "truncation", "chunk_mode")),
        defaults.chunk_mode,
    )

    log_level = _first_value(
        _clean_str(cli_overrides.get("log_level")),
        _clean_str(env.get("CHECKTEXT_LOG_LEVEL")),
        _clean_str(_get_config_value(config_data, "logging", "log_level")),
        defaults.log_level,
    )

    # pydantic coerces numeric strings and enum values, rejecting anything else
    return Settings(
        truncation_text=truncation_text,
        max_size=max_size,
        measure=measure,
        direction=direction,
        chunk_mode=chunk_mode,
        log_level=log_level,
    )


def write_config(settings: Settings, config_path: Path | str | None = None) -> Path:
    path = Path(config_path) if config_path else default_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    sections: list[str] = []
    _append_section(
        sections,
        "truncation",
        {
            "marker": settings.truncation_text,
            "max_size": settings.max_size,
            "measure": settings.measure,
            "direction": settings.direction,
            "chunk_mode": settings.chunk_mode,
        },
    )
    _append_section(sections, "logging", {"log_level": settings.log_level})

    content = "\n\n".join(filter(None, sections)) + "\n"
    path.write_text(content, encoding="utf-8")
    return path


def _read_toml(path: Path) -> dict[str, Any]:
    with path.open("rb") as handle:
        return tomllib.load(handle)


def _get_config_value(config: Mapping[str, Any], section: str, key: str) -> Any:
    section_data = config.get(section)
    if not isinstance(section_data, dict):
        return None
    return section_data.get(key)


def _clean_str(value: Any) -> Any:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped if stripped else None
    return value


def _clean_marker(value: Any) -> Any:
    # markers keep their surrounding whitespace; only empty strings are unset
    if isinstance(value, str) and not value:
        return None
    return value


def _first_value(*candidates: Any) -> Any:
    for candidate in candidates:
        if candidate is not None:
            return candidate
    return None


def _append_section(parts: list[str], name: str, values: Mapping[str, Any]) -> None:
    filtered = {k: v for k, v in values.items() if v is not None}
    if not filtered:
        return
    lines = [f"[{name}]"]
    for key, val in filtered.items():
        if isinstance(val, Enum):
            lines.append(f'{key} = "{val.value}"')
        elif isinstance(val, str):
            lines.append(f"{key} = {_toml_string(val)}")
        else:
            lines.append(f"{key} = {val}")
    parts.append("\n".join(lines))


def _toml_string(value: str) -> str:
    escaped = (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
    )
    return f'"{escaped}"'


__all__ = [
    "Settings",
    "LogLevel",
    "Measure",
    "TruncateDirection",
    "ChunkMode",
    "DEFAULT_TRUNCATION_TEXT",
    "DEFAULT_MAX_SIZE",
    "checktext_home",
    "default_config_path",
    "load_settings",
    "write_config",
]
