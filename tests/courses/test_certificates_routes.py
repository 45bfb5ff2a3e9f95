import re
import uuid

import pytest

from app.courses.models import Certificate, EnrollmentStatus
from app.courses.services.certificate_service import CertificateService
from tests.utils.factories import create_enrollment_factory
from tests.utils.helpers import API, assert_error_response, create_auth_headers

CERTIFICATE_NUMBER = re.compile(r"^LVUP-\d{8}-[A-Z0-9]{6}$")


class TestCertificateNumber:
    def test_should_match_format(self):
        assert CERTIFICATE_NUMBER.match(CertificateService.generate_certificate_number())


class TestIssueCertificate:
    @pytest.mark.asyncio
    async def test_should_issue_at_ninety_percent(
        self, test_client, db_session, test_user, test_course, test_user_token
    ):
        enrollment = create_enrollment_factory(
            db_session, test_user, test_course, completed_lessons=9
        )

        response = await test_client.post(
            f"{API}/certificates/courses/{test_course.id}",
            headers=create_auth_headers(test_user_token),
        )

        assert response.status_code == 201
        data = response.json()
        assert CERTIFICATE_NUMBER.match(data["certificate_number"])
        assert data["progress_percentage"] == 90
        assert data["user_name"] == "김수강"
        assert data["course_title"] == "기초 해부학"
        assert data["instructor_name"] == "이강사"

        db_session.refresh(enrollment)
        assert enrollment.status == EnrollmentStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_should_return_existing_certificate_with_200(
        self, test_client, db_session, test_user, test_course, test_user_token
    ):
        create_enrollment_factory(db_session, test_user, test_course, completed_lessons=10)
        headers = create_auth_headers(test_user_token)

        first = await test_client.post(
            f"{API}/certificates/courses/{test_course.id}", headers=headers
        )
        second = await test_client.post(
            f"{API}/certificates/courses/{test_course.id}", headers=headers
        )

        assert first.status_code == 201
        assert second.status_code == 200
        assert second.json()["id"] == first.json()["id"]
        assert db_session.query(Certificate).count() == 1

    @pytest.mark.asyncio
    async def test_should_reject_below_threshold(
        self, test_client, db_session, test_user, test_course, test_user_token
    ):
        create_enrollment_factory(db_session, test_user, test_course, completed_lessons=8)

        response = await test_client.post(
            f"{API}/certificates/courses/{test_course.id}",
            headers=create_auth_headers(test_user_token),
        )

        assert response.status_code == 400
        assert_error_response(response.json(), "VALIDATION_ERROR")
        assert "80%" in response.json()["error"]["message"]

    @pytest.mark.asyncio
    async def test_should_404_without_enrollment(
        self, test_client, test_course, test_user_token
    ):
        response = await test_client.post(
            f"{API}/certificates/courses/{test_course.id}",
            headers=create_auth_headers(test_user_token),
        )

        assert response.status_code == 404
        assert_error_response(response.json(), "NOT_FOUND")


class TestReadCertificates:
    @pytest.mark.asyncio
    async def test_should_list_and_fetch_own_certificates(
        self, test_client, db_session, test_user, test_course, test_user_token
    ):
        create_enrollment_factory(db_session, test_user, test_course, completed_lessons=10)
        headers = create_auth_headers(test_user_token)
        issued = await test_client.post(
            f"{API}/certificates/courses/{test_course.id}", headers=headers
        )
        certificate_id = issued.json()["id"]

        listing = await test_client.get(f"{API}/certificates", headers=headers)
        detail = await test_client.get(f"{API}/certificates/{certificate_id}", headers=headers)

        assert [c["id"] for c in listing.json()] == [certificate_id]
        assert detail.status_code == 200
        assert detail.json()["progress_percentage"] == 100

    @pytest.mark.asyncio
    async def test_should_hide_other_users_certificates(
        self, test_client, db_session, test_user, test_admin, test_course,
        test_user_token, test_admin_token,
    ):
        create_enrollment_factory(db_session, test_user, test_course, completed_lessons=10)
        issued = await test_client.post(
            f"{API}/certificates/courses/{test_course.id}",
            headers=create_auth_headers(test_user_token),
        )

        response = await test_client.get(
            f"{API}/certificates/{issued.json()['id']}",
            headers=create_auth_headers(test_admin_token),
        )

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_should_404_for_unknown_certificate(self, test_client, test_user_token):
        response = await test_client.get(
            f"{API}/certificates/{uuid.uuid4()}", headers=create_auth_headers(test_user_token)
        )

        assert response.status_code == 404
