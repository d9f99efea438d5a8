"""
Free-text blank grading.

Each blank may carry several accepted answers; a submission is correct when it
matches any one of them under that answer's own case and match rules. A blank
with no usable accepted answer is reported as ``None`` (not gradable) and never
as correct.
"""
import logging
from typing import Iterable, Mapping, Optional

from fillblank.services.schemas import CorrectAnswer, EvaluationResult, QuestionTemplate

logger = logging.getLogger(__name__)


def _normalize(text: str, case_sensitive: bool) -> str:
    return text if case_sensitive else text.casefold()


def matches(submitted: str, candidate: CorrectAnswer) -> bool:
    """Compare an already trimmed submission with a single accepted answer."""
    expected = _normalize((candidate.answer_text or "").strip(), candidate.case_sensitive)
    given = _normalize(submitted, candidate.case_sensitive)
    if candidate.exact_match:
        return given == expected
    # Loose containment: either string may contain the other.
    return expected in given or given in expected


def is_correct(blank_id: int, submitted_text, candidates: Iterable[CorrectAnswer]) -> Optional[bool]:
    usable = [
        c for c in candidates or ()
        if c.blank_id == blank_id and (c.answer_text or "").strip()
    ]
    if not usable:
        return None
    submitted = "" if submitted_text is None else str(submitted_text)
    submitted = submitted.strip()
    if not submitted:
        return False
    return any(matches(submitted, c) for c in usable)


def evaluate(
    template: QuestionTemplate,
    submission: Mapping[int, Optional[str]],
    candidates: Iterable[CorrectAnswer],
) -> EvaluationResult:
    """Grade every blank of the template; unanswered blanks count as empty."""
    candidates = list(candidates or ())
    submission = submission or {}
    results = {bid: is_correct(bid, submission.get(bid), candidates) for bid in template.blank_ids}
    result = EvaluationResult(results=results)
    logger.debug("Free-text evaluation: %d/%d correct, ungraded %s",
                 result.correct_count, len(results), result.ungraded_blank_ids)
    return result
