from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from typing import List, Optional, Literal
from sqlalchemy.orm import Session
import logging
from dataclasses import asdict
from fillblank.core.database import get_db
from fillblank.core.config import settings
from fillblank.core.auth import require_roles, TokenData
from fillblank.models.orm import FillBlankQuestion
from fillblank.services import repository
from fillblank.services.blank_registry import sync_settings
from fillblank.services.schemas import AnswerOption, BlankSegment, CorrectAnswer, QuestionType
from fillblank.services.template_parser import MAX_BLANK_ID, blank_positions, fill_preview, parse
from fillblank.services.validation import validate_question

logger = logging.getLogger(__name__)
router = APIRouter()
author_only = require_roles("author", "admin")

class CorrectAnswerIn(BaseModel):
    blank_id: int = Field(ge=0, le=MAX_BLANK_ID)
    answer_text: str
    case_sensitive: bool = False
    exact_match: bool = True
    blank_position: Optional[int] = None

class OptionIn(BaseModel):
    blank_id: int = Field(ge=0, le=MAX_BLANK_ID)
    option_text: str
    is_correct: bool = False
    order_index: int = 0

class QuestionCreate(BaseModel):
    question_type: Literal["FILL_BLANK_TEXT", "FILL_BLANK_DROPDOWN"]
    question_text: str
    points: Optional[float] = Field(default=None, ge=0)
    correct_answers: List[CorrectAnswerIn] = Field(default_factory=list)
    answer_options: List[OptionIn] = Field(default_factory=list)

class TextUpdate(BaseModel):
    question_text: str

class PreviewRequest(BaseModel):
    question_type: Literal["FILL_BLANK_TEXT", "FILL_BLANK_DROPDOWN"] = "FILL_BLANK_TEXT"
    question_text: str
    settings: Optional[dict] = None
    values: dict[int, Optional[str]] = Field(default_factory=dict)

def _segments(template) -> list:
    return [
        {"type": "blank", "blank_id": s.blank_id, "raw_token": s.raw_token} if isinstance(s, BlankSegment)
        else {"type": "text", "content": s.content}
        for s in template.segments
    ]

def _to_answers(items: List[CorrectAnswerIn]) -> List[CorrectAnswer]:
    return [CorrectAnswer(**i.model_dump()) for i in items]

def _to_options(items: List[OptionIn]) -> List[AnswerOption]:
    return [AnswerOption(**i.model_dump()) for i in items]

def _question_or_404(db: Session, question_id: int) -> FillBlankQuestion:
    q = repository.get_question(db, question_id)
    if not q: raise HTTPException(404, "Question not found")
    return q

def _report(q: FillBlankQuestion):
    template, stored, rows = repository.load_question(q)
    return validate_question(repository.question_type_of(q), template, rows, stored, settings.MIN_DROPDOWN_OPTIONS)

def _question_out(q: FillBlankQuestion) -> dict:
    template, stored, rows = repository.load_question(q)
    out = {
        "question_id": q.id, "question_type": q.question_type, "question_text": q.question_text,
        "state": q.state, "points": q.points, "settings": stored.to_dict(),
        "blank_ids": list(template.blank_ids), "segments": _segments(template),
    }
    if repository.question_type_of(q) == QuestionType.FILL_BLANK_DROPDOWN:
        out["answer_options"] = [{"id": o.id, "blank_id": o.blank_id, "option_text": o.option_text, "is_correct": o.is_correct, "order_index": o.order_index} for o in rows]
    else:
        out["correct_answers"] = [{"blank_id": a.blank_id, "answer_text": a.answer_text, "case_sensitive": a.case_sensitive, "exact_match": a.exact_match, "blank_position": a.blank_position} for a in rows]
    return out

@router.post("/questions", status_code=201)
def create_question(payload: QuestionCreate, user: TokenData = Depends(author_only), db: Session = Depends(get_db)):
    points = payload.points if payload.points is not None else settings.DEFAULT_QUESTION_POINTS
    q = FillBlankQuestion(tenant_id=settings.TENANT_ID, question_type=payload.question_type, question_text="",
                          settings={}, points=points, state="draft", created_by=user.sub)
    if payload.question_type == QuestionType.FILL_BLANK_DROPDOWN.value:
        repository.replace_answer_options(q, _to_options(payload.answer_options))
    else:
        repository.replace_correct_answers(q, _to_answers(payload.correct_answers))
    repository.apply_question_text(q, payload.question_text)
    db.add(q); db.commit(); db.refresh(q)
    logger.info("Question %s created by %s", q.id, user.sub)
    return _question_out(q)

@router.get("/questions/{question_id}", dependencies=[Depends(author_only)])
def get_question(question_id: int, db: Session = Depends(get_db)):
    return _question_out(_question_or_404(db, question_id))

@router.put("/questions/{question_id}/text", dependencies=[Depends(author_only)])
def update_text(question_id: int, payload: TextUpdate, db: Session = Depends(get_db)):
    q = _question_or_404(db, question_id)
    repository.apply_question_text(q, payload.question_text)
    if q.state == "published": q.state = "draft"
    db.commit(); db.refresh(q)
    return _question_out(q)

@router.put("/questions/{question_id}/answers", dependencies=[Depends(author_only)])
def replace_answers(question_id: int, payload: List[CorrectAnswerIn], db: Session = Depends(get_db)):
    q = _question_or_404(db, question_id)
    if repository.question_type_of(q) != QuestionType.FILL_BLANK_TEXT:
        raise HTTPException(400, "Correct answers apply to FILL_BLANK_TEXT questions only")
    repository.replace_correct_answers(q, _to_answers(payload))
    db.commit(); db.refresh(q)
    return _question_out(q)

@router.put("/questions/{question_id}/options", dependencies=[Depends(author_only)])
def replace_options(question_id: int, payload: List[OptionIn], db: Session = Depends(get_db)):
    q = _question_or_404(db, question_id)
    if repository.question_type_of(q) != QuestionType.FILL_BLANK_DROPDOWN:
        raise HTTPException(400, "Options apply to FILL_BLANK_DROPDOWN questions only")
    repository.replace_answer_options(q, _to_options(payload))
    db.commit(); db.refresh(q)
    return _question_out(q)

@router.get("/questions/{question_id}/validation", dependencies=[Depends(author_only)])
def validate(question_id: int, db: Session = Depends(get_db)):
    return _report(_question_or_404(db, question_id)).to_dict()

@router.post("/questions/{question_id}/publish", dependencies=[Depends(author_only)])
def publish(question_id: int, db: Session = Depends(get_db)):
    q = _question_or_404(db, question_id)
    report = _report(q)
    if not report.is_ready:
        raise HTTPException(409, {"message": "Question is not ready to publish", **report.to_dict()})
    q.state = "published"; db.commit()
    return {"question_id": q.id, "state": q.state, "warnings": [w.to_dict() for w in report.warnings]}

@router.post("/preview/parse", dependencies=[Depends(author_only)])
def preview(payload: PreviewRequest):
    qtype = QuestionType(payload.question_type)
    template = parse(payload.question_text)
    stored = repository.settings_from_dict(payload.settings, qtype)
    synced = sync_settings(template, qtype, stored, settings.TEXT_PLACEHOLDER_FORMAT, settings.TEXT_LABEL_FORMAT, settings.DROPDOWN_LABEL_FORMAT)
    return {
        "segments": _segments(template), "blank_ids": list(template.blank_ids),
        "positions": [asdict(p) for p in blank_positions(template.raw_text)],
        "settings": synced.to_dict(),
        "preview": fill_preview(template, payload.values, settings.PREVIEW_MISSING_TOKEN),
    }
