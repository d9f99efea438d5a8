"""
Author-time checks run before a fill-in-the-blank question can be published.

Checks are advisory: they return a report instead of raising. Anything with
ERROR severity blocks publishing; warnings are shown to the author.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from fillblank.services.blank_registry import partition_orphans
from fillblank.services.schemas import (
    AnswerOption, BlankSettings, CorrectAnswer, QuestionTemplate, QuestionType,
)
from fillblank.services.template_parser import parse

logger = logging.getLogger(__name__)


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class ValidationIssue:
    code: str
    field: str
    message: str
    blank_id: Optional[int] = None
    severity: Severity = Severity.ERROR

    def to_dict(self) -> dict:
        return {
            "code": self.code, "field": self.field, "message": self.message,
            "blank_id": self.blank_id, "severity": self.severity.value,
        }


@dataclass(frozen=True)
class ValidationReport:
    issues: Tuple[ValidationIssue, ...] = ()

    @property
    def errors(self) -> Tuple[ValidationIssue, ...]:
        return tuple(i for i in self.issues if i.severity == Severity.ERROR)

    @property
    def warnings(self) -> Tuple[ValidationIssue, ...]:
        return tuple(i for i in self.issues if i.severity == Severity.WARNING)

    @property
    def is_ready(self) -> bool:
        return not self.errors

    def codes(self) -> List[str]:
        return [i.code for i in self.issues]

    def to_dict(self) -> dict:
        return {"is_ready": self.is_ready, "issues": [i.to_dict() for i in self.issues]}


def _template(raw_text: Union[QuestionTemplate, str, None]) -> QuestionTemplate:
    return raw_text if isinstance(raw_text, QuestionTemplate) else parse(raw_text)


def _common_checks(
    template: QuestionTemplate,
    settings: Optional[BlankSettings],
    declared_fill_blank: bool,
) -> List[ValidationIssue]:
    issues = []
    if declared_fill_blank and not template.raw_text.strip():
        issues.append(ValidationIssue("empty_question_text", "question_text", "Question text must not be empty"))
    if declared_fill_blank and not template.blank_ids:
        issues.append(ValidationIssue(
            "no_blanks", "question_text",
            "Question must contain at least one blank (use {BLANK_1}, {BLANK_2}, ...)"))
    ids = template.blank_ids
    if ids and list(ids) != list(range(1, len(ids) + 1)):
        issues.append(ValidationIssue(
            "non_contiguous_blank_ids", "question_text",
            f"Blank ids are not numbered 1..{len(ids)}: {list(ids)}", severity=Severity.WARNING))
    if settings is not None:
        configured = sorted({b.blank_id for b in settings.blanks})
        if configured != list(ids) or settings.blank_count != len(ids):
            issues.append(ValidationIssue(
                "settings_mismatch", "settings",
                f"Blank settings out of date: detected {len(ids)} blanks, configured {settings.blank_count}",
                severity=Severity.WARNING))
    return issues


def validate_text_question(
    raw_text: Union[QuestionTemplate, str, None],
    answers: Iterable[CorrectAnswer],
    settings: Optional[BlankSettings] = None,
    declared_fill_blank: bool = False,
) -> ValidationReport:
    template = _template(raw_text)
    answers = list(answers or ())
    issues = _common_checks(template, settings, declared_fill_blank)
    for bid in template.blank_ids:
        usable = [a for a in answers if a.blank_id == bid and (a.answer_text or "").strip()]
        if not usable:
            issues.append(ValidationIssue(
                "missing_correct_answer", "correct_answers", f"Blank {bid} has no correct answer", bid))
    _, orphaned = partition_orphans(template, answers)
    for bid in sorted({a.blank_id for a in orphaned}):
        issues.append(ValidationIssue(
            "orphaned_answer", "correct_answers",
            f"Correct answers reference blank {bid}, which is not in the question text",
            bid, Severity.WARNING))
    report = ValidationReport(issues=tuple(issues))
    logger.debug("Free-text validation: ready=%s codes=%s", report.is_ready, report.codes())
    return report


def validate_dropdown_question(
    raw_text: Union[QuestionTemplate, str, None],
    options: Iterable[AnswerOption],
    settings: Optional[BlankSettings] = None,
    declared_fill_blank: bool = False,
    min_options: int = 2,
) -> ValidationReport:
    template = _template(raw_text)
    options = list(options or ())
    issues = _common_checks(template, settings, declared_fill_blank)
    for bid in template.blank_ids:
        for_blank = sorted((o for o in options if o.blank_id == bid), key=lambda o: o.order_index)
        if len(for_blank) < min_options:
            issues.append(ValidationIssue(
                "too_few_options", "answer_options",
                f"Blank {bid} needs at least {min_options} options (has {len(for_blank)})", bid))
        correct = [o for o in for_blank if o.is_correct]
        if not correct:
            issues.append(ValidationIssue(
                "missing_correct_option", "answer_options", f"Blank {bid} has no correct option", bid))
        elif len(correct) > 1:
            issues.append(ValidationIssue(
                "ambiguous_correct_option", "answer_options",
                f"Blank {bid} must have exactly one correct option (has {len(correct)})", bid))
        for idx, opt in enumerate(for_blank, start=1):
            if not (opt.option_text or "").strip():
                issues.append(ValidationIssue(
                    "empty_option_text", "answer_options", f"Option {idx} of blank {bid} is empty", bid))
    _, orphaned = partition_orphans(template, options)
    for bid in sorted({o.blank_id for o in orphaned}):
        issues.append(ValidationIssue(
            "orphaned_option", "answer_options",
            f"Options reference blank {bid}, which is not in the question text",
            bid, Severity.WARNING))
    report = ValidationReport(issues=tuple(issues))
    logger.debug("Dropdown validation: ready=%s codes=%s", report.is_ready, report.codes())
    return report


def validate_question(
    question_type: QuestionType,
    raw_text: Union[QuestionTemplate, str, None],
    rows: Sequence[Union[CorrectAnswer, AnswerOption]],
    settings: Optional[BlankSettings] = None,
    min_options: int = 2,
) -> ValidationReport:
    """Validate a stored question; its type always declares it fill-blank."""
    if QuestionType(question_type) == QuestionType.FILL_BLANK_DROPDOWN:
        return validate_dropdown_question(
            raw_text, [r for r in rows if isinstance(r, AnswerOption)], settings, True, min_options)
    return validate_text_question(raw_text, [r for r in rows if isinstance(r, CorrectAnswer)], settings, True)
