"""Course models."""

from app.courses.models.certificate import Certificate
from app.courses.models.course import Category, Course, CourseLevel, CourseStatus, Lesson
from app.courses.models.enrollment import Enrollment, EnrollmentStatus
from app.courses.models.progress import LessonProgress, LessonProgressStatus
from app.courses.models.question import Answer, Question
from app.courses.models.review import Review

__all__ = [
    "Category",
    "Course",
    "CourseLevel",
    "CourseStatus",
    "Lesson",
    "Enrollment",
    "EnrollmentStatus",
    "LessonProgress",
    "LessonProgressStatus",
    "Certificate",
    "Review",
    "Question",
    "Answer",
]
