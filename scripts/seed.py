"""
Seed script for a development database.

Creates the catalog categories, an admin account, an approved instructor
and two published sample courses with lessons. Can be run multiple times:
existing rows (matched by slug, email or title) are skipped.

Usage:
    SEED_ADMIN_PASSWORD=... python scripts/seed.py
"""

import os
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy.orm import Session  # noqa: E402

from app.auth.models.user import User, UserRole, UserType  # noqa: E402
from app.core.datetime_utils import utcnow  # noqa: E402
from app.core.security import get_password_hash  # noqa: E402
from app.courses.models import Category, Course, CourseLevel, CourseStatus, Lesson  # noqa: E402
from app.db import base  # noqa: E402, F401
from app.db.session import get_db  # noqa: E402
from app.instructors.models.instructor_profile import (  # noqa: E402
    InstructorProfile,
    InstructorStatus,
)

CATEGORIES = [
    ("기초 지식", "trainer-basic", "해부학, 운동생리학, 안전 관리"),
    ("전문 기술", "trainer-practical", "프로그램 설계, 동작 분석, 식단 지도"),
    ("자격증", "trainer-certification", "자격증 취득 대비"),
    ("경영 관리", "operator-management", "센터 개설, 법무, 보험"),
    ("마케팅", "operator-marketing", "회원 모집과 온라인 홍보"),
    ("운영", "operator-operation", "회원 관리와 일상 운영"),
    ("리더십", "manager-leadership", "팀 운영과 코칭"),
    ("창업", "entrepreneur-startup", "피트니스 창업 준비"),
]

ADMIN_EMAIL = os.environ.get("SEED_ADMIN_EMAIL", "admin@lvupedu.com")
INSTRUCTOR_EMAIL = os.environ.get("SEED_INSTRUCTOR_EMAIL", "instructor@lvupedu.com")

SAMPLE_COURSES = [
    {
        "title": "피트니스 트레이너 기초 해부학",
        "description": "트레이너가 반드시 알아야 할 인체 해부학과 근육의 구조를 배우는 기초 과정입니다.",
        "category_slug": "trainer-basic",
        "level": CourseLevel.BEGINNER,
        "price": 99000,
        "original_price": 129000,
        "is_free": False,
        "lessons": [
            ("인체 해부학 개요", "인체의 기본 구조와 시스템을 이해합니다", 45, True),
            ("근골격계 시스템", "뼈와 근육의 구조와 기능을 학습합니다", 60, False),
        ],
    },
    {
        "title": "PT 센터 운영 첫걸음",
        "description": "센터 오픈 전 준비해야 할 운영 체크리스트를 정리합니다.",
        "category_slug": "operator-operation",
        "level": CourseLevel.BEGINNER,
        "price": 0,
        "original_price": None,
        "is_free": True,
        "lessons": [
            ("운영 체크리스트", "오픈 전 꼭 확인할 항목", 30, True),
        ],
    },
]


def _get_or_create_user(
    db: Session, email: str, password: str, name: str, role: UserRole, user_type: UserType
) -> User:
    user = db.query(User).filter(User.email == email).first()
    if user:
        print(f"⏭️  User {email} already exists. Skipping.")
        return user

    user = User(
        email=email,
        hashed_password=get_password_hash(password),
        name=name,
        role=role,
        user_type=user_type,
    )
    db.add(user)
    db.flush()
    print(f"✅ Created user: {email} ({role.value})")
    return user


def seed_categories(db: Session) -> dict[str, Category]:
    categories = {}
    for order, (name, slug, description) in enumerate(CATEGORIES, start=1):
        category = db.query(Category).filter(Category.slug == slug).first()
        if category is None:
            category = Category(name=name, slug=slug, description=description, sort_order=order)
            db.add(category)
            db.flush()
            print(f"✅ Created category: {name}")
        categories[slug] = category
    return categories


def seed_instructor(db: Session, password: str) -> InstructorProfile:
    user = _get_or_create_user(
        db, INSTRUCTOR_EMAIL, password, "김트레이너", UserRole.INSTRUCTOR, UserType.TRAINER
    )
    profile = db.query(InstructorProfile).filter(InstructorProfile.user_id == user.id).first()
    if profile:
        return profile

    profile = InstructorProfile(
        user_id=user.id,
        title="피트니스 전문가",
        bio="수많은 고객들의 변화를 이끌어 온 피트니스 전문가입니다.",
        expertise=["웨이트 트레이닝", "재활 운동", "영양학"],
        achievements=["피트니스 센터 5개 운영", "온라인 강의 수강생 10,000명+"],
        educations=["체육교육과 졸업"],
        status=InstructorStatus.APPROVED,
        approved_at=utcnow(),
    )
    db.add(profile)
    db.flush()
    print("✅ Created approved instructor profile")
    return profile


def seed_courses(
    db: Session, instructor: InstructorProfile, categories: dict[str, Category]
) -> None:
    for sample in SAMPLE_COURSES:
        if db.query(Course).filter(Course.title == sample["title"]).first():
            print(f"⏭️  Course {sample['title']} already exists. Skipping.")
            continue

        lessons = sample["lessons"]
        course = Course(
            title=sample["title"],
            description=sample["description"],
            category_id=categories[sample["category_slug"]].id,
            instructor_id=instructor.id,
            level=sample["level"],
            status=CourseStatus.PUBLISHED,
            price=sample["price"],
            original_price=sample["original_price"],
            is_free=sample["is_free"],
            duration=sum(duration for _, _, duration, _ in lessons),
            published_at=utcnow(),
        )
        db.add(course)
        db.flush()

        for order, (title, description, duration, is_preview) in enumerate(lessons, start=1):
            db.add(
                Lesson(
                    course_id=course.id,
                    title=title,
                    description=description,
                    duration=duration,
                    order=order,
                    is_preview=is_preview,
                )
            )
        print(f"✅ Created course: {course.title} ({len(lessons)} lessons)")


def main() -> None:
    admin_password = os.environ.get("SEED_ADMIN_PASSWORD")
    if not admin_password:
        print("ERROR: SEED_ADMIN_PASSWORD env var is required.")
        sys.exit(1)
    instructor_password = os.environ.get("SEED_INSTRUCTOR_PASSWORD", admin_password)

    print("=" * 60)
    print("🌱 LVUP EDU Seeding Script")
    print("=" * 60)

    db = next(get_db())
    try:
        categories = seed_categories(db)
        _get_or_create_user(
            db, ADMIN_EMAIL, admin_password, "관리자", UserRole.ADMIN, UserType.OPERATOR
        )
        instructor = seed_instructor(db, instructor_password)
        seed_courses(db, instructor, categories)
        db.commit()
    except Exception as e:
        db.rollback()
        print(f"❌ Error: {e}")
        raise
    finally:
        db.close()

    print("=" * 60)
    print("🎉 Seeding complete!")


if __name__ == "__main__":
    main()
