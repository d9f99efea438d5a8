"""
Moves fill-in-the-blank questions between ORM rows and engine values.

Every text edit goes through ``apply_question_text`` so the stored settings are
re-synced and answer/option rows keyed to vanished blanks are removed.
"""
import logging
from typing import Iterable, List, Optional, Tuple, Union

from sqlalchemy.orm import Session

from fillblank.core.config import settings as app_settings
from fillblank.models.orm import FillBlankQuestion, QuestionAnswerOption, QuestionCorrectAnswer
from fillblank.services.blank_registry import partition_orphans, sync_settings
from fillblank.services.schemas import (
    AnswerOption, BlankSettings, CorrectAnswer, DropdownBlankConfig, QuestionTemplate,
    QuestionType, TextBlankConfig,
)
from fillblank.services.template_parser import parse

logger = logging.getLogger(__name__)


def settings_from_dict(data: Optional[dict], question_type: QuestionType) -> BlankSettings:
    """Read a stored settings document; malformed entries are skipped."""
    blanks = []
    for b in (data or {}).get("blanks") or []:
        if not isinstance(b, dict) or not isinstance(b.get("blank_id"), int):
            continue
        if question_type == QuestionType.FILL_BLANK_DROPDOWN:
            blanks.append(DropdownBlankConfig(blank_id=b["blank_id"], label=b.get("label")))
        else:
            blanks.append(TextBlankConfig(blank_id=b["blank_id"], placeholder=b.get("placeholder"), label=b.get("label")))
    return BlankSettings(blanks=tuple(blanks))


def answer_from_row(row: QuestionCorrectAnswer) -> CorrectAnswer:
    return CorrectAnswer(
        blank_id=row.blank_id, answer_text=row.answer_text, case_sensitive=bool(row.case_sensitive),
        exact_match=bool(row.exact_match), blank_position=row.blank_position,
    )


def option_from_row(row: QuestionAnswerOption) -> AnswerOption:
    return AnswerOption(
        id=row.id, blank_id=row.blank_id, option_text=row.option_text,
        is_correct=bool(row.is_correct), order_index=row.order_index,
    )


def question_type_of(question: FillBlankQuestion) -> QuestionType:
    return QuestionType(question.question_type)


def load_question(question: FillBlankQuestion) -> Tuple[QuestionTemplate, BlankSettings, List[Union[CorrectAnswer, AnswerOption]]]:
    qtype = question_type_of(question)
    template = parse(question.question_text)
    stored = settings_from_dict(question.settings, qtype)
    if qtype == QuestionType.FILL_BLANK_DROPDOWN:
        rows = [option_from_row(r) for r in question.answer_options]
    else:
        rows = [answer_from_row(r) for r in question.correct_answers]
    return template, stored, rows


def apply_question_text(question: FillBlankQuestion, raw_text: str) -> Tuple[QuestionTemplate, BlankSettings]:
    """Store new text, re-sync settings and drop child rows of vanished blanks."""
    qtype = question_type_of(question)
    template = parse(raw_text)
    synced = sync_settings(
        template, qtype, settings_from_dict(question.settings, qtype),
        placeholder_format=app_settings.TEXT_PLACEHOLDER_FORMAT,
        label_format=app_settings.TEXT_LABEL_FORMAT,
        dropdown_label_format=app_settings.DROPDOWN_LABEL_FORMAT,
    )
    question.question_text = template.raw_text
    question.settings = synced.to_dict()
    if qtype == QuestionType.FILL_BLANK_DROPDOWN:
        _, orphaned = partition_orphans(template, question.answer_options)
        for row in orphaned:
            question.answer_options.remove(row)
    else:
        _, orphaned = partition_orphans(template, question.correct_answers)
        for row in orphaned:
            question.correct_answers.remove(row)
    if orphaned:
        logger.info("Question %s: removed %d rows for vanished blanks", question.id, len(orphaned))
    return template, synced


def replace_correct_answers(question: FillBlankQuestion, answers: Iterable[CorrectAnswer]) -> None:
    question.correct_answers.clear()
    for a in answers:
        question.correct_answers.append(QuestionCorrectAnswer(
            blank_id=a.blank_id, answer_text=a.answer_text, case_sensitive=a.case_sensitive,
            exact_match=a.exact_match, blank_position=a.blank_position,
        ))


def replace_answer_options(question: FillBlankQuestion, options: Iterable[AnswerOption]) -> None:
    question.answer_options.clear()
    for o in options:
        question.answer_options.append(QuestionAnswerOption(
            blank_id=o.blank_id, option_text=o.option_text, is_correct=o.is_correct, order_index=o.order_index,
        ))


def get_question(db: Session, question_id: int) -> Optional[FillBlankQuestion]:
    return db.get(FillBlankQuestion, question_id)
