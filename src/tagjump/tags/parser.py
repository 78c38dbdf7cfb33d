"""Parser for exuberant-ctags formatted tags files.

A data line looks like::

    symbol<TAB>path<TAB>address[;"<TAB>kind<TAB>key:value...]

where ``address`` is either a 1-based line number or an ex search command
delimited by ``/`` (forward) or ``?`` (backward).  Lines starting with
``!_TAG_`` carry file metadata and are ignored.  Malformed lines are skipped
and recorded as warnings; only a file without any usable record is an error.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Optional

from tagjump.core.errors import ParseError

from .types import AddressSpec, NumericAddress, ParseWarning, PatternAddress, TagRecord, TagsIndex

logger = logging.getLogger(__name__)

TAG_METADATA_PREFIX = "!_TAG_"
EXTENSION_MARKER = ';"'
PATTERN_DELIMITERS = ("/", "?")

_NUMERIC_RE = re.compile(r"\d+")
_ESCAPE_RE = re.compile(r"\\([/?\\$^])")


class MalformedTagLine(ValueError):
    """Raised for a single line that cannot be turned into a TagRecord."""


def unescape_pattern(text: str) -> str:
    """Undo ex-style escaping; unknown backslash sequences stay literal."""
    return _ESCAPE_RE.sub(r"\1", text)


def _is_escaped(text: str, index: int) -> bool:
    backslashes = 0
    index -= 1
    while index >= 0 and text[index] == "\\":
        backslashes += 1
        index -= 1
    return backslashes % 2 == 1


def _pattern_from_body(body: str) -> PatternAddress:
    anchored_start = body.startswith("^")
    if anchored_start:
        body = body[1:]
    anchored_end = bool(body) and body.endswith("$") and not _is_escaped(body, len(body) - 1)
    if anchored_end:
        body = body[:-1]
    return PatternAddress(
        text=unescape_pattern(body),
        anchored_start=anchored_start,
        anchored_end=anchored_end,
    )


def parse_address(field: str) -> tuple[AddressSpec, str]:
    """Parse the address at the start of ``field``; return it and the rest."""
    if field[:1] in PATTERN_DELIMITERS:
        delimiter = field[0]
        i = 1
        while i < len(field):
            ch = field[i]
            if ch == "\\" and i + 1 < len(field):
                i += 2
                continue
            if ch == delimiter:
                break
            i += 1
        else:
            raise MalformedTagLine("unterminated search pattern")
        return _pattern_from_body(field[1:i]), field[i + 1 :]

    m = _NUMERIC_RE.match(field)
    if m:
        rest = field[m.end() :]
        # --excmd=combine writes "12;/pattern/"; the line number wins.
        if rest[:1] == ";" and rest[1:2] in PATTERN_DELIMITERS:
            _, rest = parse_address(rest[1:])
        return NumericAddress(int(m.group(0))), rest
    raise MalformedTagLine(f"unrecognized address {field[:20]!r}")


def parse_extension_fields(tail: str) -> tuple[Optional[str], tuple[tuple[str, str], ...]]:
    """Best-effort parse of the ``;"`` extension fields."""
    if not tail:
        return None, ()
    if not tail.startswith(EXTENSION_MARKER):
        raise MalformedTagLine(f"unexpected text after address {tail[:20]!r}")

    kind: Optional[str] = None
    fields: list[tuple[str, str]] = []
    for item in tail[len(EXTENSION_MARKER) :].split("\t"):
        if not item:
            continue
        if ":" in item:
            key, value = item.split(":", 1)
            if key == "kind" and kind is None:
                kind = value
            else:
                fields.append((key, value))
        elif kind is None:
            kind = item
        else:
            fields.append((item, ""))
    return kind, tuple(fields)


def parse_tag_line(line: str) -> TagRecord:
    # The pattern may itself contain tabs, so only the first two are separators.
    parts = line.split("\t", 2)
    if len(parts) < 3:
        raise MalformedTagLine(f"expected 3 tab-separated fields, got {len(parts)}")
    symbol, path, rest = parts
    if not symbol or not path:
        raise MalformedTagLine("empty symbol or path")
    address, tail = parse_address(rest)
    kind, fields = parse_extension_fields(tail)
    return TagRecord(symbol=symbol, path=path, address=address, kind=kind, fields=fields)


class TagsParser:
    """Turns tags file content into a TagsIndex, collecting warnings."""

    def __init__(self) -> None:
        self.warnings: list[ParseWarning] = []

    def parse(self, content: str) -> TagsIndex:
        self.warnings = []
        records: list[TagRecord] = []
        for lineno, raw in enumerate(content.split("\n"), start=1):
            line = raw.rstrip("\r")
            if not line or line.startswith(TAG_METADATA_PREFIX):
                continue
            try:
                records.append(parse_tag_line(line))
            except MalformedTagLine as exc:
                self.warnings.append(ParseWarning(lineno=lineno, reason=str(exc), line=line))
                logger.warning("Skipping malformed tag line %d: %s", lineno, exc)

        if not records:
            raise ParseError("tags file has no usable records", self.warnings)

        index = TagsIndex.from_records(records)
        logger.info(
            "Parsed tags: records=%d symbols=%d skipped=%d",
            len(records),
            len(index),
            len(self.warnings),
        )
        return index

    def parse_file(self, path: str | Path) -> TagsIndex:
        p = Path(path)
        try:
            content = p.read_text(encoding="utf-8", errors="ignore")
        except FileNotFoundError as exc:
            raise ParseError(f"tags file not found: {p}") from exc
        except OSError as exc:
            raise ParseError(f"cannot read tags file {p}: {exc}") from exc
        return self.parse(content)


def parse_tags(content: str) -> TagsIndex:
    return TagsParser().parse(content)
