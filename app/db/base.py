"""
Database base module - imports all models for Alembic migration detection.

While the imports appear unused, they register every table on Base.metadata
and resolve the string-based relationships between domains.
"""

from app.auth.models.user import User
from app.commerce.models.cart_item import CartItem
from app.commerce.models.order import Order
from app.courses.models.certificate import Certificate
from app.courses.models.course import Category, Course, Lesson
from app.courses.models.enrollment import Enrollment
from app.courses.models.progress import LessonProgress
from app.courses.models.question import Answer, Question
from app.courses.models.review import Review
from app.db.session import Base
from app.instructors.models.instructor_profile import InstructorProfile
from app.notifications.models.notification import Notification

__all__ = [
    "Base",
    "User",
    "InstructorProfile",
    "Category",
    "Course",
    "Lesson",
    "Enrollment",
    "LessonProgress",
    "Certificate",
    "Review",
    "Question",
    "Answer",
    "CartItem",
    "Order",
    "Notification",
]
