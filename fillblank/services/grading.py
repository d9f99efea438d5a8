"""
Question-level grading: reads a submitted ``answer_data`` document and grades
it with the free-text or dropdown evaluator.

Malformed entries inside the submission are skipped with a warning so that one
bad blank cannot stop the rest of the question from being graded.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Union

from fillblank.services import dropdown_grader, text_grader
from fillblank.services.schemas import (
    AnswerOption, CorrectAnswer, EvaluationResult, QuestionTemplate, QuestionType,
)
from fillblank.services.template_parser import MAX_BLANK_ID_DIGITS, parse

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QuestionGrade:
    question_type: QuestionType
    evaluation: EvaluationResult
    points_possible: float
    points_earned: float

    @property
    def is_correct(self) -> bool:
        return self.evaluation.all_correct

    def to_dict(self) -> Dict[str, Any]:
        data = self.evaluation.to_dict()
        data.update({
            "question_type": self.question_type.value,
            "points_possible": self.points_possible,
            "points_earned": self.points_earned,
        })
        return data


def _blank_entries(answer_data: Any):
    if not isinstance(answer_data, dict):
        logger.warning("Submission is not an object: %r", type(answer_data).__name__)
        return []
    blanks = answer_data.get("blanks")
    if not isinstance(blanks, list):
        logger.warning("Submission has no 'blanks' list")
        return []
    return blanks


def _entry_blank_id(entry: Any) -> Optional[int]:
    if not isinstance(entry, dict):
        return None
    raw = entry.get("blank_id")
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float) and raw.is_integer():
        return int(raw)
    if isinstance(raw, str):
        raw = raw.strip()
        if raw.isdecimal() and len(raw) <= MAX_BLANK_ID_DIGITS:
            return int(raw)
    return None


def parse_text_submission(answer_data: Any) -> Dict[int, str]:
    """``{"blanks": [{"blank_id": 1, "answer": "..."}]}`` -> ``{1: "..."}``"""
    submission = {}
    for entry in _blank_entries(answer_data):
        bid = _entry_blank_id(entry)
        if bid is None:
            logger.warning("Skipping malformed blank entry: %r", entry)
            continue
        answer = entry.get("answer")
        submission.setdefault(bid, "" if answer is None else str(answer))
    return submission


def parse_dropdown_submission(answer_data: Any) -> Dict[int, Any]:
    """``{"blanks": [{"blank_id": 1, "selected_option_id": 10}]}`` -> ``{1: 10}``"""
    submission = {}
    for entry in _blank_entries(answer_data):
        bid = _entry_blank_id(entry)
        if bid is None:
            logger.warning("Skipping malformed blank entry: %r", entry)
            continue
        submission.setdefault(bid, entry.get("selected_option_id"))
    return submission


def grade_question(
    question_type: Union[QuestionType, str],
    raw_text: Union[QuestionTemplate, str, None],
    rows: Sequence[Union[CorrectAnswer, AnswerOption]],
    answer_data: Any,
    points: float = 1.0,
) -> QuestionGrade:
    """Grade a whole question; points are awarded only when every blank is correct."""
    question_type = QuestionType(question_type)
    template = raw_text if isinstance(raw_text, QuestionTemplate) else parse(raw_text)
    if question_type == QuestionType.FILL_BLANK_DROPDOWN:
        evaluation = dropdown_grader.evaluate(
            template, parse_dropdown_submission(answer_data), [r for r in rows if isinstance(r, AnswerOption)])
    else:
        evaluation = text_grader.evaluate(
            template, parse_text_submission(answer_data), [r for r in rows if isinstance(r, CorrectAnswer)])
    earned = float(points) if evaluation.all_correct else 0.0
    if evaluation.ungraded_blank_ids:
        logger.info("Question has ungraded blanks %s; needs author attention", evaluation.ungraded_blank_ids)
    return QuestionGrade(question_type, evaluation, float(points), earned)
