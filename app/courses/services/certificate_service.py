import logging
import secrets
import string
from uuid import UUID

from sqlalchemy.orm import Query, Session, joinedload

from app.core.constants import CERTIFICATE_NUMBER_PREFIX, RANDOM_SUFFIX_LENGTH
from app.core.datetime_utils import utcnow
from app.core.exceptions import NotFoundError, ValidationError
from app.courses.models import Certificate, Course
from app.courses.schemas.certificate import CertificateResponse
from app.courses.services.enrollment_service import ENROLLED_STATUSES, EnrollmentService
from app.courses.services.progress_service import ProgressService
from app.instructors.models.instructor_profile import InstructorProfile

logger = logging.getLogger(__name__)

CODE_ALPHABET = string.ascii_uppercase + string.digits


def certificate_to_response(certificate: Certificate) -> CertificateResponse:
    course = certificate.course
    instructor = course.instructor
    return CertificateResponse(
        id=str(certificate.id),
        certificate_number=certificate.certificate_number,
        user_id=str(certificate.user_id),
        user_name=certificate.user.name,
        course_id=str(course.id),
        course_title=course.title,
        instructor_name=instructor.user.name if instructor else None,
        progress_percentage=certificate.progress_percentage,
        issued_at=certificate.issued_at,
    )


class CertificateService:
    @staticmethod
    def generate_certificate_number() -> str:
        """LVUP-YYYYMMDD-XXXXXX with six uppercase alphanumerics."""
        suffix = "".join(secrets.choice(CODE_ALPHABET) for _ in range(RANDOM_SUFFIX_LENGTH))
        return f"{CERTIFICATE_NUMBER_PREFIX}-{utcnow():%Y%m%d}-{suffix}"

    @staticmethod
    def _query(db: Session) -> Query[Certificate]:
        return db.query(Certificate).options(
            joinedload(Certificate.user),
            joinedload(Certificate.course)
            .joinedload(Course.instructor)
            .joinedload(InstructorProfile.user),
        )

    @staticmethod
    def issue_certificate(user_id: UUID, course_id: UUID, db: Session) -> tuple[Certificate, bool]:
        """Issue (or return the already issued) certificate.

        Returns the certificate and whether it was created by this call.
        """
        enrollment = EnrollmentService.get_user_enrollment(user_id, course_id, db)
        if enrollment is None or enrollment.status not in ENROLLED_STATUSES:
            raise NotFoundError("수강 정보를 찾을 수 없습니다.", resource="enrollment")

        existing = (
            CertificateService._query(db)
            .filter(Certificate.user_id == user_id, Certificate.course_id == course_id)
            .first()
        )
        if existing:
            return existing, False

        result = ProgressService.get_enrollment_progress(enrollment.id, course_id, db)
        if not result.can_get_certificate:
            raise ValidationError(
                f"수료 조건을 충족하지 않았습니다. (현재 진도율 {result.percentage}%)",
                field="progress",
            )

        number = CertificateService.generate_certificate_number()
        while db.query(Certificate.id).filter(Certificate.certificate_number == number).first():
            number = CertificateService.generate_certificate_number()

        certificate = Certificate(
            user_id=user_id,
            course_id=course_id,
            certificate_number=number,
            progress_percentage=result.percentage,
        )
        db.add(certificate)
        EnrollmentService.mark_completed(enrollment)
        db.commit()
        logger.info("Certificate issued", extra={"certificate_number": number})

        return CertificateService.get_certificate(user_id, certificate.id, db), True

    @staticmethod
    def list_user_certificates(user_id: UUID, db: Session) -> list[Certificate]:
        return (
            CertificateService._query(db)
            .filter(Certificate.user_id == user_id)
            .order_by(Certificate.issued_at.desc())
            .all()
        )

    @staticmethod
    def get_certificate(user_id: UUID, certificate_id: UUID, db: Session) -> Certificate:
        certificate = (
            CertificateService._query(db)
            .filter(Certificate.id == certificate_id, Certificate.user_id == user_id)
            .first()
        )
        if certificate is None:
            raise NotFoundError("수료증을 찾을 수 없습니다.", resource="certificate")
        return certificate
