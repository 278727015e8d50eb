"""Normalization of free-form idea generation output.

The text generation provider is asked for a JSON array of idea objects but
routinely answers with something else: the array wrapped in prose, a loose
sequence of objects, or plain numbered text. ``parse_ideas_result`` turns
any of those into ``ParsedIdea`` records by trying three strategies in
order and keeping the first one that yields something usable:

1. ``STRUCTURED_LIST``   - the whole (trimmed) text is a JSON array.
2. ``EXTRACTED_RECORDS`` - balanced ``{...}`` spans decoded one by one;
   spans that fail to decode are dropped without aborting the scan.
3. ``SEGMENTED_TEXT``    - blocks split on blank lines / enumerators with
   labelled fields (``Description:``, ``Keywords:`` ...) picked out.

When all three come up empty the result is ``FAILED`` and carries ``count``
placeholder ideas, so callers asking for ideas always get some back. Nothing
in this module raises on malformed input.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Iterator, Optional

logger = logging.getLogger(__name__)

PLACEHOLDER_TITLE = "Content Idea {n}"
PLACEHOLDER_DESCRIPTION = "No description available. Please try generating ideas again."
DEFAULT_KEYWORDS = ("content", "idea")
DEFAULT_AUDIENCE = "General audience"
DEFAULT_ENGAGEMENT = "medium"
MAX_TITLE_LENGTH = 100


class ParseTier(str, Enum):
    """Strategy that produced a parse result."""

    STRUCTURED_LIST = "structured_list"
    EXTRACTED_RECORDS = "extracted_records"
    SEGMENTED_TEXT = "segmented_text"
    FAILED = "failed"


@dataclass
class ParsedIdea:
    title: str
    description: str
    keywords: list[str] = field(default_factory=lambda: list(DEFAULT_KEYWORDS))
    target_audience: str = DEFAULT_AUDIENCE
    estimated_engagement: str = DEFAULT_ENGAGEMENT


@dataclass
class ParseResult:
    tier: ParseTier
    ideas: list[ParsedIdea] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.tier is not ParseTier.FAILED and bool(self.ideas)


_FAILED = ParseResult(ParseTier.FAILED)


# ---------------------------------------------------------------------------
# Field normalisation (shared with the ORM layer)
# ---------------------------------------------------------------------------

_KEYWORD_SPLIT_RE = re.compile(r"[,;|]+")


def normalize_keywords(values: Iterable[Any] | str | None) -> list[str]:
    """Trim, drop empties and de-duplicate keywords keeping first-seen order.

    Comparison is case-sensitive: ``["ai", "AI"]`` keeps both entries. A plain
    string is split on commas, semicolons and pipes first.
    """
    if values is None:
        return []
    if isinstance(values, str):
        values = _KEYWORD_SPLIT_RE.split(values)
    seen: set[str] = set()
    cleaned: list[str] = []
    for raw in values:
        if raw is None:
            continue
        keyword = str(raw).strip()
        if not keyword or keyword in seen:
            continue
        seen.add(keyword)
        cleaned.append(keyword)
    return cleaned


def normalize_engagement(value: Any) -> str:
    """Map free text onto high / medium / low.

    "high" wins over "low" when both appear; anything else is medium.
    """
    if value is None:
        return DEFAULT_ENGAGEMENT
    text = str(getattr(value, "value", value)).strip().lower()
    if "high" in text:
        return "high"
    if "low" in text:
        return "low"
    return DEFAULT_ENGAGEMENT


def placeholder_ideas(count: int) -> list[ParsedIdea]:
    return [
        ParsedIdea(title=PLACEHOLDER_TITLE.format(n=n), description=PLACEHOLDER_DESCRIPTION)
        for n in range(1, max(count, 0) + 1)
    ]


# ---------------------------------------------------------------------------
# Structured records (tiers 1 and 2)
# ---------------------------------------------------------------------------

_TITLE_KEYS = ("title", "name", "headline")
_DESCRIPTION_KEYS = ("description", "summary")
_KEYWORD_KEYS = ("keywords", "tags")
_AUDIENCE_KEYS = ("targetAudience", "target_audience", "audience")
_ENGAGEMENT_KEYS = ("estimatedEngagement", "estimated_engagement", "engagement", "engagementPotential")


def _first_text(record: dict, keys: Iterable[str]) -> Optional[str]:
    for key in keys:
        value = record.get(key)
        if value is None or isinstance(value, (dict, list)):
            continue
        text = str(value).strip()
        if text:
            return text
    return None


def _looks_like_record(record: Any) -> bool:
    return isinstance(record, dict) and (
        _first_text(record, _TITLE_KEYS) is not None
        or _first_text(record, _DESCRIPTION_KEYS) is not None
    )


def _record_to_idea(record: dict, position: int) -> ParsedIdea:
    raw_keywords = None
    for key in _KEYWORD_KEYS:
        if record.get(key) is not None:
            raw_keywords = record[key]
            break
    if raw_keywords is not None and not isinstance(raw_keywords, (str, list, tuple)):
        raw_keywords = [raw_keywords]
    keywords = normalize_keywords(raw_keywords)
    engagement = None
    for key in _ENGAGEMENT_KEYS:
        if record.get(key) is not None:
            engagement = record[key]
            break
    return ParsedIdea(
        title=_first_text(record, _TITLE_KEYS) or PLACEHOLDER_TITLE.format(n=position),
        description=_first_text(record, _DESCRIPTION_KEYS) or PLACEHOLDER_DESCRIPTION,
        keywords=keywords or list(DEFAULT_KEYWORDS),
        target_audience=_first_text(record, _AUDIENCE_KEYS) or DEFAULT_AUDIENCE,
        estimated_engagement=normalize_engagement(engagement),
    )


def _records_to_ideas(records: Iterable[Any]) -> list[ParsedIdea]:
    usable = [r for r in records if _looks_like_record(r)]
    return [_record_to_idea(r, i) for i, r in enumerate(usable, start=1)]


def _strip_code_fences(text: str) -> str:
    stripped = text.strip()
    match = re.fullmatch(r"```[A-Za-z]*\s*(.*?)\s*```", stripped, re.DOTALL)
    return match.group(1).strip() if match else stripped


def parse_structured_list(text: str) -> ParseResult:
    if not (text.startswith("[") and text.endswith("]")):
        return _FAILED
    try:
        data = json.loads(text)
    except ValueError:
        return _FAILED
    if not isinstance(data, list):
        return _FAILED
    ideas = _records_to_ideas(data)
    return ParseResult(ParseTier.STRUCTURED_LIST, ideas) if ideas else _FAILED


def _matching_brace(text: str, start: int) -> Optional[int]:
    """Index of the brace closing ``text[start]`` or None if it never closes."""
    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i
    return None


def iter_brace_spans(text: str) -> Iterator[str]:
    """Yield top-level balanced ``{...}`` substrings in document order."""
    pos = 0
    while True:
        start = text.find("{", pos)
        if start == -1:
            return
        end = _matching_brace(text, start)
        if end is None:
            # unclosed brace: skip it and keep scanning
            pos = start + 1
            continue
        yield text[start:end + 1]
        pos = end + 1


def _collect_records(value: Any) -> list[dict]:
    """Record-like dicts found in ``value``, descending through wrappers.

    ``{"ideas": [{...}, {...}]}`` yields the inner records.
    """
    if _looks_like_record(value):
        return [value]
    if isinstance(value, dict):
        value = list(value.values())
    if isinstance(value, list):
        return [r for item in value for r in _collect_records(item)]
    return []


def _decode_spans(text: str) -> list[dict]:
    records: list[dict] = []
    for span in iter_brace_spans(text):
        try:
            decoded = json.loads(span)
        except ValueError:
            # a wrapper broken by one bad record still holds good ones
            inner = _decode_spans(span[1:-1])
            if not inner:
                logger.debug("dropping undecodable record span", extra={"span_length": len(span)})
            records.extend(inner)
            continue
        records.extend(_collect_records(decoded))
    return records


def parse_embedded_records(text: str) -> ParseResult:
    if "{" not in text:
        return _FAILED
    ideas = _records_to_ideas(_decode_spans(text))
    return ParseResult(ParseTier.EXTRACTED_RECORDS, ideas) if ideas else _FAILED


# ---------------------------------------------------------------------------
# Unstructured text (tier 3)
# ---------------------------------------------------------------------------

_ENUMERATOR_RE = re.compile(r"^\s*(?:\d+\.|#|\*|-|idea\s+\d+\s*:)", re.IGNORECASE)
_LEADING_MARKER_RE = re.compile(r"^[\s#*>:-]*(?:\d+\.(?!\d))?[\s#*>:-]*")
_TITLE_PREFIX_RE = re.compile(r"^(?:(?:idea(?:\s*\d+)?|title)\s*[:.)-]\s*|idea\s*\d+\s*$)", re.IGNORECASE)

_LABELS = {
    "title": r"title|idea(?:\s*\d+)?",
    "description": r"description|summary",
    "keywords": r"keywords|tags",
    "audience": r"(?:target\s+)?audience",
    "engagement": r"(?:estimated\s+)?engagement(?:\s+potential)?",
}


def _label_re(pattern: str) -> re.Pattern[str]:
    return re.compile(
        rf"^[\s#*>-]*(?:\d+\.\s*)?(?:{pattern})\s*\**\s*:\s*\**\s*(.*?)\s*\**\s*$",
        re.IGNORECASE | re.MULTILINE,
    )


_LABEL_RES = {name: _label_re(pattern) for name, pattern in _LABELS.items()}
_FIELD_LINE_RE = _label_re("|".join(v for k, v in _LABELS.items() if k != "title"))
# "Title:" lines never open a block, unlike "Idea 2:" which is an enumerator
_BLOCK_BODY_RE = _label_re("title|" + "|".join(v for k, v in _LABELS.items() if k != "title"))


def _label_value(block: str, name: str) -> Optional[str]:
    for match in _LABEL_RES[name].finditer(block):
        value = match.group(1).strip()
        if value:
            return value
    return None


def _is_field_line(line: str) -> bool:
    return bool(_FIELD_LINE_RE.match(line)) or bool(_LABEL_RES["title"].match(line))


def _is_preamble(lines: list[str]) -> bool:
    # "Here are 3 ideas for ...:" style lead-in
    return len(lines) == 1 and lines[0].rstrip().endswith(":") and not _is_field_line(lines[0])


def _is_lead_sentence(block: str) -> bool:
    # "Sure! Here are three ideas." opening a reply that has more blocks
    line = block.strip()
    return (
        "\n" not in line
        and line.endswith((".", "!"))
        and not _ENUMERATOR_RE.match(line)
        and not _is_field_line(line)
    )


def split_blocks(text: str) -> list[str]:
    """Split text on blank lines and on lines opening with an enumerator.

    Labelled field lines (``- Keywords: ...``) stay with the block they
    belong to even when they carry a bullet.
    """
    blocks: list[str] = []
    current: list[str] = []

    def flush() -> None:
        if current and not _is_preamble(current):
            blocks.append("\n".join(current))
        current.clear()

    for line in text.splitlines():
        if not line.strip():
            flush()
            continue
        if current and _ENUMERATOR_RE.match(line) and not _BLOCK_BODY_RE.match(line):
            flush()
        current.append(line)
    flush()
    if len(blocks) > 1 and _is_lead_sentence(blocks[0]):
        blocks.pop(0)
    return blocks


def _clean_line(line: str) -> str:
    return _LEADING_MARKER_RE.sub("", line).replace("**", "").strip()


def _segment_to_idea(block: str, position: int) -> ParsedIdea:
    lines = [line for line in block.splitlines() if line.strip()]
    placeholder_title = PLACEHOLDER_TITLE.format(n=position)

    title = ""
    title_from_first_line = False
    if lines:
        title = _TITLE_PREFIX_RE.sub("", _clean_line(lines[0])).strip()
        title_from_first_line = bool(title) and len(title) <= MAX_TITLE_LENGTH
    if not title_from_first_line:
        title = _label_value(block, "title") or placeholder_title
        title = title.replace("**", "").strip() or placeholder_title

    description = _label_value(block, "description")
    if not description:
        body = lines[1:] if title_from_first_line else lines
        candidates = [_clean_line(line) for line in body if not _is_field_line(line)]
        description = " ".join(c for c in candidates[:2] if c).strip()
    description = description or PLACEHOLDER_DESCRIPTION

    keywords = normalize_keywords(_label_value(block, "keywords") or "")
    return ParsedIdea(
        title=title,
        description=description,
        keywords=keywords or list(DEFAULT_KEYWORDS),
        target_audience=_label_value(block, "audience") or DEFAULT_AUDIENCE,
        estimated_engagement=normalize_engagement(_label_value(block, "engagement")),
    )


def parse_segmented_text(text: str, count: int) -> ParseResult:
    blocks = split_blocks(text)
    if count > 0:
        blocks = blocks[:count]
    ideas = []
    for position, block in enumerate(blocks, start=1):
        idea = _segment_to_idea(block, position)
        if idea.title == PLACEHOLDER_TITLE.format(n=position) and idea.description == PLACEHOLDER_DESCRIPTION:
            continue
        ideas.append(idea)
    return ParseResult(ParseTier.SEGMENTED_TEXT, ideas) if ideas else _FAILED


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------

def parse_ideas_result(text: str | None, count: int) -> ParseResult:
    """Run the three strategies in priority order and report which one won."""
    cleaned = _strip_code_fences(text or "")
    tiers = (
        lambda: parse_structured_list(cleaned),
        lambda: parse_embedded_records(cleaned),
        lambda: parse_segmented_text(cleaned, count),
    )
    for attempt in tiers:
        result = attempt()
        if result.ok:
            logger.debug("idea response parsed", extra={"tier": result.tier.value, "ideas": len(result.ideas)})
            return result
    logger.info("idea response unusable, returning placeholders", extra={"count": count})
    return ParseResult(ParseTier.FAILED, placeholder_ideas(count))


def parse_ideas(text: str | None, count: int) -> list[ParsedIdea]:
    return parse_ideas_result(text, count).ideas


__all__ = [
    "ParseTier",
    "ParsedIdea",
    "ParseResult",
    "normalize_keywords",
    "normalize_engagement",
    "placeholder_ideas",
    "iter_brace_spans",
    "split_blocks",
    "parse_structured_list",
    "parse_embedded_records",
    "parse_segmented_text",
    "parse_ideas_result",
    "parse_ideas",
]
