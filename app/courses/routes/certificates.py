from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.auth.dependencies import get_current_user
from app.auth.models.user import User
from app.courses.schemas.certificate import CertificateResponse
from app.courses.services.certificate_service import CertificateService, certificate_to_response
from app.db.session import get_db

router = APIRouter()


@router.post(
    "/certificates/courses/{course_id}",
    response_model=CertificateResponse,
    status_code=status.HTTP_201_CREATED,
)
async def issue_certificate(
    course_id: UUID,
    response: Response,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> CertificateResponse:
    """Issue a completion certificate; an already issued one is returned with 200."""
    certificate, created = CertificateService.issue_certificate(current_user.id, course_id, db)
    if not created:
        response.status_code = status.HTTP_200_OK
    return certificate_to_response(certificate)


@router.get("/certificates", response_model=list[CertificateResponse])
async def get_my_certificates(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[CertificateResponse]:
    return [
        certificate_to_response(c)
        for c in CertificateService.list_user_certificates(current_user.id, db)
    ]


@router.get("/certificates/{certificate_id}", response_model=CertificateResponse)
async def get_certificate(
    certificate_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> CertificateResponse:
    certificate = CertificateService.get_certificate(current_user.id, certificate_id, db)
    return certificate_to_response(certificate)
