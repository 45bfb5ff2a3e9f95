import logging
import re
import secrets
import uuid

from sqlalchemy.orm import Session

from app.auth.models.user import User, UserRole
from app.auth.schemas.auth import SignUpRequest
from app.auth.schemas.user import ProfileUpdateRequest
from app.core import security
from app.core.datetime_utils import utcnow
from app.core.exceptions import ConflictError, NotFoundError, UnauthorizedError

logger = logging.getLogger(__name__)

NICKNAME_STRIP = re.compile(r"[^a-zA-Z0-9가-힣]")


def generate_nickname(name: str) -> str:
    """Name stripped to letters, digits and Hangul plus four random digits."""
    suffix = f"{secrets.randbelow(10_000):04d}"
    return f"{NICKNAME_STRIP.sub('', name)}{suffix}"


class UserService:
    @staticmethod
    def get_by_email(db: Session, email: str) -> User | None:
        return db.query(User).filter(User.email == email.lower()).first()

    @staticmethod
    def get_by_id(db: Session, user_id: uuid.UUID) -> User:
        user = db.query(User).filter(User.id == user_id).first()
        if user is None:
            raise NotFoundError("사용자를 찾을 수 없습니다.", resource="user")
        return user

    @staticmethod
    def is_nickname_available(
        db: Session, nickname: str, exclude_user_id: uuid.UUID | None = None
    ) -> bool:
        owner = db.query(User).filter(User.nickname == nickname).first()
        if owner is None:
            return True
        return exclude_user_id is not None and owner.id == exclude_user_id

    @staticmethod
    def create(db: Session, data: SignUpRequest) -> User:
        email = data.email.lower()
        if UserService.get_by_email(db, email):
            raise ConflictError("이미 사용중인 이메일입니다.", resource="user")

        nickname = data.nickname
        if nickname is not None:
            if not UserService.is_nickname_available(db, nickname):
                raise ConflictError("이미 사용중인 닉네임입니다.", resource="nickname")
        else:
            nickname = generate_nickname(data.name)
            while not UserService.is_nickname_available(db, nickname):
                nickname = generate_nickname(data.name)

        user = User(
            email=email,
            hashed_password=security.get_password_hash(data.password),
            name=data.name,
            nickname=nickname,
            phone=data.phone,
            user_type=data.user_type,
            role=UserRole.STUDENT,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        logger.info("User signed up", extra={"user_id": str(user.id)})
        return user

    @staticmethod
    def authenticate(db: Session, email: str, password: str) -> User:
        user = UserService.get_by_email(db, email)
        if user is None or not security.verify_password(password, user.hashed_password):
            raise UnauthorizedError("이메일 또는 비밀번호가 올바르지 않습니다.")
        if not user.is_active:
            raise UnauthorizedError("비활성화된 계정입니다.")

        user.last_login_at = utcnow()
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def update_profile(db: Session, user: User, data: ProfileUpdateRequest) -> User:
        changes = data.model_dump(exclude_unset=True)
        nickname = changes.get("nickname")
        if nickname and not UserService.is_nickname_available(db, nickname, user.id):
            raise ConflictError("이미 사용중인 닉네임입니다.", resource="nickname")

        for field, value in changes.items():
            if value is not None:
                setattr(user, field, value)
        db.commit()
        db.refresh(user)
        return user
