import logging
from typing import Any
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session, joinedload, selectinload

from app.auth.models.user import User
from app.auth.schemas.user import UserSummary
from app.core.exceptions import ForbiddenError, NotFoundError, UnauthorizedError
from app.core.schemas import Pagination
from app.courses.models import Answer, Course, Lesson, Question
from app.courses.schemas.question import (
    AnswerCreateRequest,
    AnswerResponse,
    QuestionCreateRequest,
    QuestionDetailResponse,
    QuestionFilter,
    QuestionListResponse,
    QuestionResponse,
    QuestionSort,
)
from app.courses.services.enrollment_service import EnrollmentService
from app.instructors.models.instructor_profile import InstructorProfile
from app.notifications.models.notification import NotificationType
from app.notifications.services.notification_service import NotificationService

logger = logging.getLogger(__name__)


def answer_to_response(answer: Answer) -> AnswerResponse:
    return AnswerResponse(
        id=str(answer.id),
        question_id=str(answer.question_id),
        content=answer.content,
        is_instructor_answer=answer.is_instructor_answer,
        user=UserSummary.model_validate(answer.user),
        created_at=answer.created_at,
    )


def _question_fields(question: Question, answer_count: int) -> dict[str, Any]:
    return dict(
        id=str(question.id),
        course_id=str(question.course_id),
        lesson_id=str(question.lesson_id) if question.lesson_id else None,
        title=question.title,
        content=question.content,
        is_resolved=question.is_resolved,
        view_count=question.view_count,
        answer_count=answer_count,
        user=UserSummary.model_validate(question.user),
        created_at=question.created_at,
    )


def question_to_response(question: Question, answer_count: int) -> QuestionResponse:
    return QuestionResponse(**_question_fields(question, answer_count))


def question_to_detail(question: Question) -> QuestionDetailResponse:
    return QuestionDetailResponse(
        **_question_fields(question, len(question.answers)),
        answers=[answer_to_response(a) for a in question.answers],
    )


class QAService:
    @staticmethod
    def _course(course_id: UUID, db: Session) -> Course:
        course = (
            db.query(Course)
            .options(joinedload(Course.instructor))
            .filter(Course.id == course_id)
            .first()
        )
        if course is None:
            raise NotFoundError("강의를 찾을 수 없습니다.", resource="course")
        return course

    @staticmethod
    def is_course_instructor(user: User, course: Course) -> bool:
        instructor: InstructorProfile | None = course.instructor
        return instructor is not None and instructor.user_id == user.id

    @staticmethod
    def can_participate(user: User, course: Course, db: Session) -> bool:
        return (
            user.is_admin
            or QAService.is_course_instructor(user, course)
            or EnrollmentService.is_enrolled(user.id, course.id, db)
        )

    @staticmethod
    def list_questions(
        course_id: UUID,
        page: int,
        limit: int,
        db: Session,
        filter: QuestionFilter = "all",
        sort: QuestionSort = "latest",
        current_user: User | None = None,
    ) -> QuestionListResponse:
        QAService._course(course_id, db)

        answer_count = (
            select(func.count(Answer.id))
            .where(Answer.question_id == Question.id)
            .correlate(Question)
            .scalar_subquery()
        )

        conditions = [Question.course_id == course_id]
        if filter == "resolved":
            conditions.append(Question.is_resolved.is_(True))
        elif filter == "unresolved":
            conditions.append(Question.is_resolved.is_(False))
        elif filter == "my":
            if current_user is None:
                raise UnauthorizedError("내 질문을 보려면 로그인이 필요합니다.")
            conditions.append(Question.user_id == current_user.id)
        if sort == "unanswered":
            conditions.append(answer_count == 0)

        order_by = [Question.created_at.desc()]
        if sort == "popular":
            order_by.insert(0, Question.view_count.desc())

        total = db.scalar(select(func.count()).select_from(Question).where(*conditions)) or 0
        rows = db.execute(
            select(Question, answer_count)
            .options(joinedload(Question.user))
            .where(*conditions)
            .order_by(*order_by)
            .offset((page - 1) * limit)
            .limit(limit)
        ).all()

        return QuestionListResponse(
            questions=[question_to_response(q, count) for q, count in rows],
            pagination=Pagination.from_query(total, page, limit),
        )

    @staticmethod
    def create_question(
        user: User, course_id: UUID, data: QuestionCreateRequest, db: Session
    ) -> Question:
        course = QAService._course(course_id, db)
        if not QAService.can_participate(user, course, db):
            raise ForbiddenError("수강생만 질문을 작성할 수 있습니다.")

        if data.lesson_id is not None:
            lesson = db.get(Lesson, data.lesson_id)
            if lesson is None or lesson.course_id != course_id:
                raise NotFoundError("레슨을 찾을 수 없습니다.", resource="lesson")

        question = Question(
            course_id=course_id,
            lesson_id=data.lesson_id,
            user_id=user.id,
            title=data.title,
            content=data.content,
        )
        db.add(question)
        db.commit()
        db.refresh(question)
        return question

    @staticmethod
    def get_question(question_id: UUID, db: Session, count_view: bool = False) -> Question:
        question = (
            db.query(Question)
            .options(
                joinedload(Question.user),
                selectinload(Question.answers).joinedload(Answer.user),
                joinedload(Question.course).joinedload(Course.instructor),
            )
            .filter(Question.id == question_id)
            .first()
        )
        if question is None:
            raise NotFoundError("질문을 찾을 수 없습니다.", resource="question")
        if count_view:
            question.view_count = (question.view_count or 0) + 1
            db.commit()
            db.refresh(question)
        return question

    @staticmethod
    def create_answer(
        user: User, question_id: UUID, data: AnswerCreateRequest, db: Session
    ) -> Answer:
        question = QAService.get_question(question_id, db)
        course = question.course
        if not QAService.can_participate(user, course, db):
            raise ForbiddenError("수강생 또는 강사만 답변을 작성할 수 있습니다.")

        is_instructor = QAService.is_course_instructor(user, course)
        answer = Answer(
            question_id=question.id,
            user_id=user.id,
            content=data.content,
            is_instructor_answer=is_instructor,
        )
        db.add(answer)

        if question.user_id != user.id:
            NotificationService.create(
                question.user_id,
                NotificationType.NEW_ANSWER,
                "새 답변 등록",
                f"'{question.title}' 질문에 새 답변이 등록되었습니다.",
                db,
                data={"question_id": str(question.id), "course_id": str(course.id)},
                commit=False,
            )

        db.commit()
        db.refresh(answer)
        return answer

    @staticmethod
    def set_resolved(user: User, question_id: UUID, resolved: bool, db: Session) -> Question:
        question = QAService.get_question(question_id, db)
        if not (
            question.user_id == user.id
            or QAService.is_course_instructor(user, question.course)
            or user.is_admin
        ):
            raise ForbiddenError("질문 작성자 또는 강사만 변경할 수 있습니다.")
        question.is_resolved = resolved
        db.commit()
        return QAService.get_question(question_id, db)
