"""Report output assembled for a reporting API with per-field size limits.

``ReportOutput`` holds the title and the summary/text documents of one
report. Documents are only truncated when the payload is rendered, so the
same output can be sized for destinations with different limits.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel, ConfigDict

from checktext.config import Measure
from checktext.document import TextDocument, TextDocumentBuilder

logger = logging.getLogger(__name__)

MAX_FIELD_SIZE = 65_535
TRUNCATED_MESSAGE = "\n\nOutput truncated."
TRUNCATED_MESSAGE_BUILD_LOG = "Build log truncated.\n\n"
LOG_DETAILS_TEMPLATE = "<details><summary>Build Log</summary>\n\n```\n{log}\n```\n\n</details>"

# room left for the template and surrounding markup
_LOG_DETAILS_SLACK = 32

_ANSI_SGR = re.compile(r"\x1b\[[;\d]*m")


def strip_ansi(text: str) -> str:
    """Remove ANSI colour (SGR) escape sequences."""

    return _ANSI_SGR.sub("", text)


def build_log_details(
    lines: Iterable[str], max_size: int = MAX_FIELD_SIZE, *, measure: Measure = Measure.CHARS
) -> str:
    """Render the tail of a build log inside a collapsible markdown block.

    The log is truncated from the start on line boundaries so the most recent
    output, usually the failure, survives. Returns an empty string for a
    blank log.
    """

    log = strip_ansi("\n".join(lines))
    budget = max_size - len(LOG_DETAILS_TEMPLATE) - _LOG_DETAILS_SLACK
    tail = (
        TextDocumentBuilder()
        .set_chunk_on_newlines()
        .set_truncate_start()
        .with_truncation_text(TRUNCATED_MESSAGE_BUILD_LOG)
        .add_text(log)
        .build()
        .build(budget, measure)
    )
    if not tail.strip():
        return ""
    return LOG_DETAILS_TEMPLATE.format(log=tail)


class ReportOutput(BaseModel):
    """Title, summary and text of one report; every field is optional."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    title: str | None = None
    summary: TextDocument | None = None
    text: TextDocument | None = None

    def summary_within(self, max_size: int, measure: Measure = Measure.BYTES) -> str | None:
        if self.summary is None:
            return None
        return self.summary.build(max_size, measure)

    def text_within(self, max_size: int, measure: Measure = Measure.BYTES) -> str | None:
        if self.text is None:
            return None
        return self.text.build(max_size, measure)

    def to_payload(self, max_size: int = MAX_FIELD_SIZE, measure: Measure = Measure.BYTES) -> dict[str, Any]:
        """Return the present fields, each sized to ``max_size``."""

        payload: dict[str, Any] = {}
        if self.title is not None:
            payload["title"] = self.title
        summary = self.summary_within(max_size, measure)
        if summary is not None:
            payload["summary"] = summary
        text = self.text_within(max_size, measure)
        if text is not None:
            payload["text"] = text
        logger.debug("rendered report payload fields=%s", sorted(payload))
        return payload


class ReportOutputBuilder:
    def __init__(self) -> None:
        self._title: str | None = None
        self._summary: TextDocument | None = None
        self._text: TextDocument | None = None

    def with_title(self, title: str) -> ReportOutputBuilder:
        self._title = title
        return self

    def with_summary(self, summary: str | TextDocument) -> ReportOutputBuilder:
        self._summary = _as_document(summary)
        return self

    def with_text(self, text: str | TextDocument) -> ReportOutputBuilder:
        self._text = _as_document(text)
        return self

    def build(self) -> ReportOutput:
        return ReportOutput(title=self._title, summary=self._summary, text=self._text)


def _as_document(value: str | TextDocument) -> TextDocument:
    if isinstance(value, TextDocument):
        return value
    if isinstance(value, str):
        return TextDocument.from_string(value)
    raise TypeError(f"expected str or TextDocument, got {type(value).__name__}")


__all__ = [
    "MAX_FIELD_SIZE",
    "TRUNCATED_MESSAGE",
    "TRUNCATED_MESSAGE_BUILD_LOG",
    "LOG_DETAILS_TEMPLATE",
    "strip_ansi",
    "build_log_details",
    "ReportOutput",
    "ReportOutputBuilder",
]
