"""Parsing of published dates read from scraped pages.

``date_format`` in the site configuration is either a :func:`~datetime.datetime.strptime`
format (anything containing ``%``) or a reference layout written against the
instant ``Mon Jan 2 15:04:05 MST 2006``, e.g. ``2006-01-02T15:04:05Z07:00``.
Reference layouts are translated to ``strptime`` directives before parsing.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from functools import lru_cache

from rssrouter.errors import DateParseError

__all__ = ["parse_published", "parse_time", "translate_layout"]

logger = logging.getLogger(__name__)

# Longest tokens first so that "January" wins over "Jan" and "2006" over "2".
_LAYOUT_TOKENS = [
    ("January", "%B"),
    ("Monday", "%A"),
    ("Z07:00", "%z"),
    ("-07:00", "%z"),
    ("Z0700", "%z"),
    ("-0700", "%z"),
    ("2006", "%Y"),
    ("Jan", "%b"),
    ("Mon", "%a"),
    ("MST", "%Z"),
    ("Z07", "%z"),
    ("-07", "%z"),
    ("_2", "%d"),
    ("01", "%m"),
    ("02", "%d"),
    ("03", "%I"),
    ("04", "%M"),
    ("05", "%S"),
    ("06", "%y"),
    ("15", "%H"),
    ("PM", "%p"),
    ("pm", "%p"),
    ("1", "%m"),
    ("2", "%d"),
    ("3", "%I"),
    ("4", "%M"),
    ("5", "%S"),
]

_FRACTION = r"[.,](?:0+|9+)(?!\d)"
_LAYOUT_RE = re.compile(
    "|".join([_FRACTION] + [re.escape(token) for token, _ in _LAYOUT_TOKENS])
)
_DIRECTIVES = dict(_LAYOUT_TOKENS)


@lru_cache(maxsize=128)
def translate_layout(layout: str) -> str:
    """Translate a reference layout into an equivalent ``strptime`` format."""

    parts = []
    position = 0
    for match in _LAYOUT_RE.finditer(layout):
        parts.append(layout[position:match.start()].replace("%", "%%"))
        token = match.group(0)
        if token[0] in ".,":
            parts.append(token[0] + "%f")
        else:
            parts.append(_DIRECTIVES[token])
        position = match.end()
    parts.append(layout[position:].replace("%", "%%"))
    return "".join(parts)


# %f takes at most microseconds; nanosecond fractions are truncated.
_LONG_FRACTION_RE = re.compile(r"([.,]\d{6})\d+")


def _candidate_formats(layout: str) -> list[str]:
    if "%" in layout:
        return [layout]
    fmt = translate_layout(layout)
    formats = [fmt]
    # Reference layouts accept a fraction right after the seconds even when
    # the layout does not spell one out.
    if "%S" in fmt and "%f" not in fmt:
        formats.extend(fmt.replace("%S", f"%S{sep}%f", 1) for sep in ".,")
    return formats


def parse_time(value: str, layout: str) -> datetime:
    """Parse ``value`` against ``layout``, returning a timezone-aware datetime.

    Values without an offset are taken to be UTC.
    """

    if not value:
        raise DateParseError("no date value to parse")

    error: ValueError | None = None
    for fmt in _candidate_formats(layout):
        text = _LONG_FRACTION_RE.sub(r"\1", value) if "%f" in fmt else value
        try:
            parsed = datetime.strptime(text, fmt)
            break
        except ValueError as exc:
            error = exc
    else:
        raise DateParseError(f"cannot parse {value!r} as {layout!r}: {error}") from error

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_published(value: str, layout: str, now: datetime | None = None) -> datetime:
    """Parse a published date, falling back to the current time when it fails."""

    try:
        return parse_time(value, layout)
    except DateParseError as exc:
        logger.warning("Error parsing time: %s. Using current time instead.", exc)
        return now if now is not None else datetime.now(timezone.utc)
