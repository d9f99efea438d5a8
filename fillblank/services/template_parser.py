"""
Template parser for fill-in-the-blank question text.

Blanks are written as ``{BLANK_<digits>}``. Anything else, including malformed
tokens such as ``{BLANK_x}`` or ``{BLANK_1``, is ordinary text. Parsing never
raises: authors edit the text live and half-typed tokens are expected.
"""
import logging
import re
from typing import List, Mapping, Optional, Tuple, Union

from fillblank.services.schemas import (
    BlankPosition, BlankSegment, QuestionTemplate, Segment, TextSegment,
)

logger = logging.getLogger(__name__)

# Ids have at most 18 digits and fit a signed 64-bit column.
# A longer digit run is literal text.
MAX_BLANK_ID_DIGITS = 18
MAX_BLANK_ID = 10 ** MAX_BLANK_ID_DIGITS - 1
BLANK_PATTERN = re.compile(r"\{BLANK_([0-9]{1,%d})\}" % MAX_BLANK_ID_DIGITS)


def parse(raw_text: Optional[str]) -> QuestionTemplate:
    """Split raw question text into text and blank segments."""
    raw_text = raw_text or ""
    segments: List[Segment] = []
    cursor = 0
    for m in BLANK_PATTERN.finditer(raw_text):
        if m.start() > cursor:
            segments.append(TextSegment(raw_text[cursor:m.start()]))
        segments.append(BlankSegment(blank_id=int(m.group(1)), raw_token=m.group(0)))
        cursor = m.end()
    if cursor < len(raw_text):
        segments.append(TextSegment(raw_text[cursor:]))
    template = QuestionTemplate(raw_text=raw_text, segments=tuple(segments))
    logger.debug("Parsed template: %d segments, blank ids %s", len(segments), template.blank_ids)
    return template


def _as_template(template_or_text: Union[QuestionTemplate, str, None]) -> QuestionTemplate:
    if isinstance(template_or_text, QuestionTemplate):
        return template_or_text
    return parse(template_or_text)


def blank_ids(template_or_text: Union[QuestionTemplate, str, None]) -> Tuple[int, ...]:
    return _as_template(template_or_text).blank_ids


def count_blanks(raw_text: Optional[str]) -> int:
    """Number of blank tokens, counting repeated ids once per occurrence."""
    return sum(1 for _ in BLANK_PATTERN.finditer(raw_text or ""))


def blank_positions(raw_text: Optional[str]) -> List[BlankPosition]:
    return [
        BlankPosition(blank_id=int(m.group(1)), start_index=m.start(), end_index=m.end(), placeholder=m.group(0))
        for m in BLANK_PATTERN.finditer(raw_text or "")
    ]


def fill_preview(
    template_or_text: Union[QuestionTemplate, str, None],
    values: Mapping[int, Optional[str]],
    missing: str = "___",
) -> str:
    """
    Render question text with each blank replaced by its value.

    Every occurrence of a blank gets the same value. Blanks without a value,
    or with an empty one, are shown as ``missing``.
    """
    template = _as_template(template_or_text)
    parts = []
    for seg in template.segments:
        if isinstance(seg, BlankSegment):
            value = values.get(seg.blank_id)
            parts.append(str(value) if value else missing)
        else:
            parts.append(seg.content)
    return "".join(parts)
