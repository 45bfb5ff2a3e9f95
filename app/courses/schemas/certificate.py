from pydantic import BaseModel

from app.core.datetime_utils import UTCDatetime


class CertificateResponse(BaseModel):
    id: str
    certificate_number: str
    user_id: str
    user_name: str
    course_id: str
    course_title: str
    instructor_name: str | None = None
    progress_percentage: int
    issued_at: UTCDatetime
