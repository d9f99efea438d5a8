from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy import BigInteger, Integer, String, Text, Boolean, ForeignKey, JSON, Float

class Base(DeclarativeBase): pass

class FillBlankQuestion(Base):
    __tablename__ = "fill_blank_questions"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    tenant_id: Mapped[str] = mapped_column(String)
    question_type: Mapped[str] = mapped_column(String(32))
    question_text: Mapped[str] = mapped_column(Text)
    settings: Mapped[dict] = mapped_column(JSON, default=dict)
    points: Mapped[float] = mapped_column(Float, default=1.0)
    state: Mapped[str] = mapped_column(String, default="draft")
    created_by: Mapped[str] = mapped_column(String)
    correct_answers: Mapped[list["QuestionCorrectAnswer"]] = relationship(
        back_populates="question", cascade="all, delete-orphan", order_by="QuestionCorrectAnswer.id")
    answer_options: Mapped[list["QuestionAnswerOption"]] = relationship(
        back_populates="question", cascade="all, delete-orphan", order_by="QuestionAnswerOption.order_index")

class QuestionCorrectAnswer(Base):
    __tablename__ = "question_correct_answers"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    question_id: Mapped[int] = mapped_column(Integer, ForeignKey("fill_blank_questions.id", ondelete="CASCADE"))
    blank_id: Mapped[int] = mapped_column(BigInteger)
    answer_text: Mapped[str] = mapped_column(Text)
    case_sensitive: Mapped[bool] = mapped_column(Boolean, default=False)
    exact_match: Mapped[bool] = mapped_column(Boolean, default=True)
    blank_position: Mapped[int | None] = mapped_column(Integer, nullable=True)
    question: Mapped["FillBlankQuestion"] = relationship(back_populates="correct_answers")

class QuestionAnswerOption(Base):
    __tablename__ = "question_answer_options"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    question_id: Mapped[int] = mapped_column(Integer, ForeignKey("fill_blank_questions.id", ondelete="CASCADE"))
    blank_id: Mapped[int] = mapped_column(BigInteger)
    option_text: Mapped[str] = mapped_column(Text)
    is_correct: Mapped[bool] = mapped_column(Boolean, default=False)
    order_index: Mapped[int] = mapped_column(Integer, default=0)
    question: Mapped["FillBlankQuestion"] = relationship(back_populates="answer_options")

class StudentAnswer(Base):
    __tablename__ = "student_answers"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    question_id: Mapped[int] = mapped_column(Integer, ForeignKey("fill_blank_questions.id", ondelete="CASCADE"))
    user_id: Mapped[str] = mapped_column(String)
    answer_data: Mapped[dict] = mapped_column(JSON)
    results: Mapped[dict] = mapped_column(JSON, default=dict)
    is_correct: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    points_earned: Mapped[float] = mapped_column(Float, default=0.0)
