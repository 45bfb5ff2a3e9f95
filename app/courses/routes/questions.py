from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.auth.dependencies import get_current_user, get_optional_user
from app.auth.models.user import User
from app.core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from app.courses.schemas.question import (
    AnswerCreateRequest,
    AnswerResponse,
    QuestionCreateRequest,
    QuestionDetailResponse,
    QuestionFilter,
    QuestionListResponse,
    QuestionResponse,
    QuestionSort,
    ResolveRequest,
)
from app.courses.services.qa_service import (
    QAService,
    answer_to_response,
    question_to_detail,
    question_to_response,
)
from app.db.session import get_db

router = APIRouter()


@router.get("/courses/{course_id}/questions", response_model=QuestionListResponse)
async def list_questions(
    course_id: UUID,
    filter: QuestionFilter = Query("all"),
    sort: QuestionSort = Query("latest"),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
    current_user: User | None = Depends(get_optional_user),
) -> QuestionListResponse:
    """Course Q&A board; filter=my needs a signed-in user."""
    return QAService.list_questions(
        course_id, page, limit, db, filter=filter, sort=sort, current_user=current_user
    )


@router.post(
    "/courses/{course_id}/questions",
    response_model=QuestionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_question(
    course_id: UUID,
    data: QuestionCreateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> QuestionResponse:
    question = QAService.create_question(current_user, course_id, data, db)
    return question_to_response(question, 0)


@router.get("/questions/{question_id}", response_model=QuestionDetailResponse)
async def get_question(
    question_id: UUID,
    db: Session = Depends(get_db),
) -> QuestionDetailResponse:
    """Question with its answers; counts a view."""
    return question_to_detail(QAService.get_question(question_id, db, count_view=True))


@router.post(
    "/questions/{question_id}/answers",
    response_model=AnswerResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_answer(
    question_id: UUID,
    data: AnswerCreateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> AnswerResponse:
    return answer_to_response(QAService.create_answer(current_user, question_id, data, db))


@router.patch("/questions/{question_id}/resolve", response_model=QuestionDetailResponse)
async def resolve_question(
    question_id: UUID,
    data: ResolveRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> QuestionDetailResponse:
    question = QAService.set_resolved(current_user, question_id, data.is_resolved, db)
    return question_to_detail(question)
