"""
Dropdown blank grading.
"""
import logging
from typing import Iterable, Mapping, Optional

from fillblank.services.schemas import AnswerOption, EvaluationResult, QuestionTemplate

logger = logging.getLogger(__name__)


def _coerce_option_id(value) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def is_correct(blank_id: int, selected_option_id, options: Iterable[AnswerOption]) -> Optional[bool]:
    """
    Grade one dropdown selection.

    Returns ``None`` when nothing is selected or the blank has no option flagged
    correct. A selected id that belongs to another blank is ``False`` even when
    that option is correct for its own blank.
    """
    if selected_option_id is None:
        return None
    options = list(options or ())
    if not any(o.blank_id == blank_id and o.is_correct for o in options):
        return None
    selected = _coerce_option_id(selected_option_id)
    if selected is None:
        return False
    chosen = next((o for o in options if o.id is not None and o.id == selected), None)
    if chosen is None or chosen.blank_id != blank_id:
        return False
    return bool(chosen.is_correct)


def evaluate(
    template: QuestionTemplate,
    submission: Mapping[int, Optional[int]],
    options: Iterable[AnswerOption],
) -> EvaluationResult:
    options = list(options or ())
    submission = submission or {}
    results = {bid: is_correct(bid, submission.get(bid), options) for bid in template.blank_ids}
    result = EvaluationResult(results=results)
    logger.debug("Dropdown evaluation: %d/%d correct, ungraded %s",
                 result.correct_count, len(results), result.ungraded_blank_ids)
    return result
