from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field

from app.auth.schemas.user import UserSummary
from app.core.datetime_utils import UTCDatetime
from app.core.schemas import Pagination

QuestionFilter = Literal["all", "resolved", "unresolved", "my"]
QuestionSort = Literal["latest", "popular", "unanswered"]


class QuestionCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1)
    lesson_id: UUID | None = None


class AnswerCreateRequest(BaseModel):
    content: str = Field(..., min_length=1)


class AnswerResponse(BaseModel):
    id: str
    question_id: str
    content: str
    is_instructor_answer: bool
    user: UserSummary
    created_at: UTCDatetime


class QuestionResponse(BaseModel):
    id: str
    course_id: str
    lesson_id: str | None = None
    title: str
    content: str
    is_resolved: bool
    view_count: int
    answer_count: int
    user: UserSummary
    created_at: UTCDatetime


class QuestionDetailResponse(QuestionResponse):
    answers: list[AnswerResponse] = Field(default_factory=list)


class QuestionListResponse(BaseModel):
    questions: list[QuestionResponse]
    pagination: Pagination


class ResolveRequest(BaseModel):
    is_resolved: bool = True
