"""
Value types shared by the fill-in-the-blank parser, registry, graders and validation.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple, Union


class QuestionType(str, Enum):
    """Fill-in-the-blank variants."""
    FILL_BLANK_TEXT = "FILL_BLANK_TEXT"
    FILL_BLANK_DROPDOWN = "FILL_BLANK_DROPDOWN"


@dataclass(frozen=True)
class TextSegment:
    content: str

    @property
    def text(self) -> str:
        return self.content


@dataclass(frozen=True)
class BlankSegment:
    blank_id: int
    raw_token: str

    @property
    def text(self) -> str:
        return self.raw_token


Segment = Union[TextSegment, BlankSegment]


@dataclass(frozen=True)
class QuestionTemplate:
    """Parsed question text: interleaved text and blank segments."""
    raw_text: str
    segments: Tuple[Segment, ...] = ()

    @property
    def blank_ids(self) -> Tuple[int, ...]:
        """Ascending distinct blank ids."""
        return tuple(sorted({s.blank_id for s in self.segments if isinstance(s, BlankSegment)}))

    @property
    def blank_count(self) -> int:
        return len(self.blank_ids)

    def render(self) -> str:
        return "".join(s.text for s in self.segments)


@dataclass(frozen=True)
class BlankPosition:
    blank_id: int
    start_index: int
    end_index: int
    placeholder: str


@dataclass(frozen=True)
class TextBlankConfig:
    blank_id: int
    placeholder: Optional[str] = None
    label: Optional[str] = None


@dataclass(frozen=True)
class DropdownBlankConfig:
    blank_id: int
    label: Optional[str] = None


BlankConfig = Union[TextBlankConfig, DropdownBlankConfig]


@dataclass(frozen=True)
class BlankSettings:
    """Settings document stored with a question."""
    blanks: Tuple[BlankConfig, ...] = ()

    @property
    def blank_count(self) -> int:
        return len(self.blanks)

    def to_dict(self) -> Dict:
        blanks = []
        for b in self.blanks:
            if isinstance(b, TextBlankConfig):
                blanks.append({"blank_id": b.blank_id, "placeholder": b.placeholder, "label": b.label})
            else:
                blanks.append({"blank_id": b.blank_id, "label": b.label})
        return {"blank_count": self.blank_count, "blanks": blanks}


@dataclass(frozen=True)
class CorrectAnswer:
    blank_id: int
    answer_text: str
    case_sensitive: bool = False
    exact_match: bool = True
    blank_position: Optional[int] = None


@dataclass(frozen=True)
class AnswerOption:
    blank_id: int
    option_text: str
    is_correct: bool = False
    order_index: int = 0
    id: Optional[int] = None


@dataclass(frozen=True)
class EvaluationResult:
    """
    Per-blank tri-state grading outcome.

    ``None`` means the blank could not be graded (missing author configuration
    or no selection) and is kept distinct from ``False`` for review screens.
    """
    results: Dict[int, Optional[bool]] = field(default_factory=dict)

    @property
    def all_correct(self) -> bool:
        # Nothing to grade is never a pass.
        if not self.results:
            return False
        return all(v is True for v in self.results.values())

    @property
    def ungraded_blank_ids(self) -> Tuple[int, ...]:
        return tuple(sorted(k for k, v in self.results.items() if v is None))

    @property
    def incorrect_blank_ids(self) -> Tuple[int, ...]:
        return tuple(sorted(k for k, v in self.results.items() if v is False))

    @property
    def correct_count(self) -> int:
        return sum(1 for v in self.results.values() if v is True)

    def to_dict(self) -> Dict:
        return {
            "results": {str(k): self.results[k] for k in sorted(self.results)},
            "all_correct": self.all_correct,
            "ungraded_blank_ids": list(self.ungraded_blank_ids),
            "correct_count": self.correct_count,
        }
