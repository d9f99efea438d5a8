from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session
import logging
from fillblank.core.database import get_db
from fillblank.core.auth import require_roles, TokenData
from fillblank.models.orm import StudentAnswer
from fillblank.services import repository
from fillblank.services.grading import grade_question
from fillblank.services.schemas import BlankSegment, QuestionType

logger = logging.getLogger(__name__)
router = APIRouter()
student_only = require_roles("student", "admin")

class AnswerSubmit(BaseModel):
  blanks: List[Any]

class AnswerResult(BaseModel):
  answer_id: int
  question_id: int
  question_type: str
  results: Dict[str, Optional[bool]]
  all_correct: bool
  ungraded_blank_ids: List[int]
  correct_count: int
  points_possible: float
  points_earned: float

@router.get("/questions/{question_id}", dependencies=[Depends(student_only)])
def get_question(question_id: int, db: Session = Depends(get_db)):
  q = repository.get_question(db, question_id)
  if not q or q.state != "published": raise HTTPException(404, "Question not found")
  template, stored, rows = repository.load_question(q)
  payload = {
    "question_id": q.id, "question_type": q.question_type, "points": q.points,
    "segments": [
      {"type": "blank", "blank_id": s.blank_id} if isinstance(s, BlankSegment) else {"type": "text", "content": s.content}
      for s in template.segments
    ],
    "blanks": stored.to_dict()["blanks"],
  }
  if repository.question_type_of(q) == QuestionType.FILL_BLANK_DROPDOWN:
    payload["options"] = [
      {"id": o.id, "blank_id": o.blank_id, "option_text": o.option_text, "order_index": o.order_index}
      for o in sorted(rows, key=lambda o: (o.blank_id, o.order_index))
    ]
  return payload

@router.post("/questions/{question_id}/answers", response_model=AnswerResult, dependencies=[Depends(student_only)])
def submit_answer(question_id: int, payload: AnswerSubmit, user: TokenData = Depends(student_only), db: Session = Depends(get_db)):
  q = repository.get_question(db, question_id)
  if not q or q.state != "published": raise HTTPException(404, "Question not found")
  template, _, rows = repository.load_question(q)
  answer_data = payload.model_dump()
  grade = grade_question(q.question_type, template, rows, answer_data, q.points)
  ev = grade.evaluation
  row = StudentAnswer(question_id=q.id, user_id=user.sub, answer_data=answer_data,
                      results={str(k): v for k, v in ev.results.items()},
                      is_correct=ev.all_correct if not ev.ungraded_blank_ids else None,
                      points_earned=grade.points_earned)
  db.add(row); db.commit(); db.refresh(row)
  logger.info("Graded answer %s for question %s: all_correct=%s", row.id, q.id, ev.all_correct)
  return AnswerResult(answer_id=row.id, question_id=q.id, question_type=grade.question_type.value,
                      results={str(k): ev.results[k] for k in sorted(ev.results)}, all_correct=ev.all_correct,
                      ungraded_blank_ids=list(ev.ungraded_blank_ids), correct_count=ev.correct_count,
                      points_possible=grade.points_possible, points_earned=grade.points_earned)
