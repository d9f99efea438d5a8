"""
Keeps per-blank configuration in step with the blanks found in question text.
"""
import logging
from typing import Iterable, List, Optional, Sequence, Tuple, TypeVar, Union

from fillblank.services.schemas import (
    AnswerOption, BlankConfig, BlankSettings, CorrectAnswer, DropdownBlankConfig,
    QuestionTemplate, QuestionType, TextBlankConfig,
)
from fillblank.services.template_parser import parse

logger = logging.getLogger(__name__)

TEXT_PLACEHOLDER_FORMAT = "Enter answer for blank {id}"
TEXT_LABEL_FORMAT = "Blank {id}"
DROPDOWN_LABEL_FORMAT = "Dropdown {id}"

C = TypeVar("C", TextBlankConfig, DropdownBlankConfig)
R = TypeVar("R", CorrectAnswer, AnswerOption)


def _sync(template: QuestionTemplate, existing: Iterable[C], make_default) -> Tuple[C, ...]:
    wanted = template.blank_ids
    by_id = {}
    for cfg in existing or ():
        # First entry per id wins; later duplicates are dropped.
        by_id.setdefault(cfg.blank_id, cfg)
    synced = tuple(by_id[i] if i in by_id else make_default(i) for i in wanted)
    added = [i for i in wanted if i not in by_id]
    removed = sorted(i for i in by_id if i not in set(wanted))
    if added or removed:
        logger.debug("Blank configs synced: added %s, removed %s", added, removed)
    return synced


def sync_text_configs(
    template: QuestionTemplate,
    existing: Iterable[TextBlankConfig] = (),
    placeholder_format: str = TEXT_PLACEHOLDER_FORMAT,
    label_format: str = TEXT_LABEL_FORMAT,
) -> Tuple[TextBlankConfig, ...]:
    """Add defaults for new blanks, drop vanished ones, keep the rest untouched."""
    return _sync(
        template, existing,
        lambda i: TextBlankConfig(blank_id=i, placeholder=placeholder_format.format(id=i), label=label_format.format(id=i)),
    )


def sync_dropdown_configs(
    template: QuestionTemplate,
    existing: Iterable[DropdownBlankConfig] = (),
    label_format: str = DROPDOWN_LABEL_FORMAT,
) -> Tuple[DropdownBlankConfig, ...]:
    return _sync(template, existing, lambda i: DropdownBlankConfig(blank_id=i, label=label_format.format(id=i)))


def sync(template: QuestionTemplate, existing: Sequence[BlankConfig] = ()) -> Tuple[BlankConfig, ...]:
    """Sync a config set of either kind; an empty set is treated as free-text."""
    existing = tuple(existing or ())
    if existing and isinstance(existing[0], DropdownBlankConfig):
        return sync_dropdown_configs(template, [c for c in existing if isinstance(c, DropdownBlankConfig)])
    return sync_text_configs(template, [c for c in existing if isinstance(c, TextBlankConfig)])


def sync_settings(
    template: QuestionTemplate,
    question_type: QuestionType,
    settings: Optional[BlankSettings] = None,
    placeholder_format: str = TEXT_PLACEHOLDER_FORMAT,
    label_format: str = TEXT_LABEL_FORMAT,
    dropdown_label_format: str = DROPDOWN_LABEL_FORMAT,
) -> BlankSettings:
    existing = settings.blanks if settings else ()
    if question_type == QuestionType.FILL_BLANK_DROPDOWN:
        blanks = sync_dropdown_configs(
            template, [c for c in existing if isinstance(c, DropdownBlankConfig)], dropdown_label_format)
    else:
        blanks = sync_text_configs(
            template, [c for c in existing if isinstance(c, TextBlankConfig)], placeholder_format, label_format)
    return BlankSettings(blanks=blanks)


def auto_generate_settings(
    raw_text: Union[QuestionTemplate, str, None],
    question_type: QuestionType = QuestionType.FILL_BLANK_TEXT,
    **formats,
) -> BlankSettings:
    """Fresh settings with default entries for every blank in the text."""
    template = raw_text if isinstance(raw_text, QuestionTemplate) else parse(raw_text)
    return sync_settings(template, question_type, None, **formats)


def partition_orphans(template: QuestionTemplate, rows: Iterable[R]) -> Tuple[List[R], List[R]]:
    """Split answer/option rows into those keyed to live blanks and orphans."""
    live = set(template.blank_ids)
    kept, orphaned = [], []
    for row in rows or ():
        (kept if row.blank_id in live else orphaned).append(row)
    return kept, orphaned


def prune_orphans(template: QuestionTemplate, rows: Iterable[R]) -> List[R]:
    kept, orphaned = partition_orphans(template, rows)
    if orphaned:
        logger.info("Pruned %d orphaned rows for blanks %s",
                    len(orphaned), sorted({r.blank_id for r in orphaned}))
    return kept


def answers_for_blank(blank_id: int, answers: Iterable[CorrectAnswer]) -> List[CorrectAnswer]:
    return [a for a in answers or () if a.blank_id == blank_id]


def correct_option_for_blank(blank_id: int, options: Iterable[AnswerOption]) -> Optional[AnswerOption]:
    return next((o for o in options or () if o.blank_id == blank_id and o.is_correct), None)
