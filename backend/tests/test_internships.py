from datetime import datetime

import pytest
from httpx import AsyncClient
from sqlalchemy import select

from internhub.core.exceptions import RenderingError
from internhub.models import Internship, InternshipStatus

API = "/api/v1/internships"


@pytest.fixture
def internship_data(test_user):
    """Create-internship payload for test_user"""
    return {
        "userId": test_user.id,
        "title": "Cloud Infrastructure Internship",
        "role": "DevOps Intern",
        "startDate": "2024-01-01T00:00:00Z",
        "endDate": "2024-03-01T00:00:00Z",
        "description": "Terraform and CI pipelines",
    }


# ==================== CRUD ====================

@pytest.mark.asyncio
async def test_create_internship(client: AsyncClient, admin_auth_headers, internship_data, mock_email):
    response = await client.post(API, json=internship_data, headers=admin_auth_headers)

    assert response.status_code == 201
    data = response.json()
    assert data["title"] == internship_data["title"]
    assert data["status"] == "ACTIVE"
    assert data["startDate"] in ("2024-01-01T00:00:00Z", "2024-01-01T00:00:00+00:00")
    assert data["user"]["id"] == internship_data["userId"]
    mock_email.send_internship_assignment_email.assert_awaited_once()


@pytest.mark.asyncio
async def test_create_requires_admin(client: AsyncClient, auth_headers, internship_data):
    response = await client.post(API, json=internship_data, headers=auth_headers)

    assert response.status_code == 403
    assert response.json()["detail"] == "Admin access required"


@pytest.mark.asyncio
async def test_create_requires_token(client: AsyncClient, internship_data):
    response = await client.post(API, json=internship_data)
    assert response.status_code in (401, 403)


@pytest.mark.asyncio
async def test_create_invalid_date_range(client: AsyncClient, admin_auth_headers, internship_data, db_session):
    internship_data["endDate"] = "2023-12-01T00:00:00Z"

    response = await client.post(API, json=internship_data, headers=admin_auth_headers)

    assert response.status_code == 400
    assert response.json()["detail"] == "End date must be after start date"
    assert (await db_session.execute(select(Internship))).first() is None


@pytest.mark.asyncio
async def test_create_for_unknown_user(client: AsyncClient, admin_auth_headers, internship_data):
    internship_data["userId"] = "00000000-0000-0000-0000-000000000000"

    response = await client.post(API, json=internship_data, headers=admin_auth_headers)

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_list_internships(client: AsyncClient, admin_auth_headers, test_user, make_internship):
    await make_internship(test_user)
    await make_internship(test_user, title="Second")

    response = await client.get(API, headers=admin_auth_headers)

    assert response.status_code == 200
    assert len(response.json()) == 2


@pytest.mark.asyncio
async def test_get_internship(client: AsyncClient, auth_headers, test_user, make_internship):
    internship = await make_internship(test_user)

    response = await client.get(f"{API}/{internship.id}", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["id"] == internship.id


@pytest.mark.asyncio
async def test_datetimes_carry_utc_offset(client: AsyncClient, auth_headers, test_user, make_internship):
    internship = await make_internship(
        test_user, start=datetime(2024, 1, 1, 9, 30), end=datetime(2024, 3, 1)
    )

    response = await client.get(f"{API}/{internship.id}", headers=auth_headers)

    data = response.json()
    assert data["startDate"].startswith("2024-01-01T09:30:00")
    for field in ("startDate", "endDate", "createdAt", "updatedAt"):
        assert data[field].endswith(("Z", "+00:00")), field


@pytest.mark.asyncio
async def test_get_missing_internship(client: AsyncClient, auth_headers):
    response = await client.get(f"{API}/does-not-exist", headers=auth_headers)

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "INTERNSHIP_NOT_FOUND"


@pytest.mark.asyncio
async def test_update_to_completed_emails_once(client: AsyncClient, admin_auth_headers, test_user, make_internship, mock_email):
    internship = await make_internship(test_user)

    for _ in range(2):
        response = await client.patch(
            f"{API}/{internship.id}", json={"status": "COMPLETED"}, headers=admin_auth_headers
        )
        assert response.status_code == 200
        assert response.json()["status"] == "COMPLETED"

    mock_email.send_internship_completion_email.assert_awaited_once()


@pytest.mark.asyncio
async def test_update_invalid_range(client: AsyncClient, admin_auth_headers, test_user, make_internship):
    internship = await make_internship(test_user, start=datetime(2024, 1, 1), end=datetime(2024, 3, 1))

    response = await client.patch(
        f"{API}/{internship.id}",
        json={"endDate": "2023-06-01T00:00:00Z"},
        headers=admin_auth_headers
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_update_rejects_null_title(client: AsyncClient, admin_auth_headers, test_user, make_internship):
    internship = await make_internship(test_user)

    response = await client.patch(f"{API}/{internship.id}", json={"title": None}, headers=admin_auth_headers)

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_delete_internship(client: AsyncClient, admin_auth_headers, test_user, make_internship):
    internship = await make_internship(test_user)

    response = await client.delete(f"{API}/{internship.id}", headers=admin_auth_headers)

    assert response.status_code == 200
    assert response.json() == {"message": "Internship deleted successfully"}

    response = await client.get(f"{API}/{internship.id}", headers=admin_auth_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_requires_admin(client: AsyncClient, auth_headers, test_user, make_internship):
    internship = await make_internship(test_user)

    response = await client.delete(f"{API}/{internship.id}", headers=auth_headers)

    assert response.status_code == 403


# ==================== USER VIEWS ====================

@pytest.mark.asyncio
async def test_dashboard_is_not_shadowed_by_id_route(client: AsyncClient, auth_headers, test_user, make_internship):
    await make_internship(test_user)
    await make_internship(test_user, status=InternshipStatus.COMPLETED)

    response = await client.get(f"{API}/dashboard", headers=auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["stats"] == {"total": 2, "active": 1, "completed": 1, "cancelled": 0}
    assert len(data["activeInternships"]) == 1
    assert len(data["completedInternships"]) == 1


@pytest.mark.asyncio
async def test_my_internships(client: AsyncClient, auth_headers, test_user, other_user, make_internship):
    await make_internship(test_user)
    await make_internship(other_user)

    response = await client.get(f"{API}/my-internships", headers=auth_headers)

    assert response.status_code == 200
    [item] = response.json()
    assert item["user"]["id"] == test_user.id
    assert 0 <= item["progress"] <= 100
    assert item["isOverdue"] is False


@pytest.mark.asyncio
async def test_user_internships(client: AsyncClient, auth_headers, other_user, make_internship):
    await make_internship(other_user)

    response = await client.get(f"{API}/user/{other_user.id}", headers=auth_headers)

    assert response.status_code == 200
    assert len(response.json()) == 1


@pytest.mark.asyncio
async def test_internship_details(client: AsyncClient, auth_headers, test_user, make_internship):
    internship = await make_internship(test_user, status=InternshipStatus.COMPLETED)

    response = await client.get(f"{API}/my-internships/{internship.id}/details", headers=auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["canDownloadCertificate"] is True
    assert data["progress"] == 100
    assert data["duration"] == "2 months"


@pytest.mark.asyncio
async def test_internship_details_of_other_user(client: AsyncClient, other_auth_headers, test_user, make_internship):
    internship = await make_internship(test_user)

    response = await client.get(f"{API}/my-internships/{internship.id}/details", headers=other_auth_headers)

    assert response.status_code == 404
    assert response.json()["detail"] == "Internship not found or access denied"


# ==================== CERTIFICATES ====================

@pytest.mark.asyncio
async def test_certificate_eligibility(client: AsyncClient, auth_headers, test_user, make_internship):
    completed = await make_internship(test_user, status=InternshipStatus.COMPLETED)
    active = await make_internship(test_user)

    response = await client.get(f"{API}/{completed.id}/certificate-eligibility", headers=auth_headers)
    assert response.json() == {"canDownload": True}

    response = await client.get(f"{API}/{active.id}/certificate-eligibility", headers=auth_headers)
    assert response.json() == {
        "canDownload": False,
        "reason": "Certificate is only available for completed internships",
    }


@pytest.mark.asyncio
async def test_certificate_data(client: AsyncClient, auth_headers, test_user, make_internship):
    internship = await make_internship(test_user, status=InternshipStatus.COMPLETED)

    response = await client.get(f"{API}/{internship.id}/certificate-data", headers=auth_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["data"]["userName"] == test_user.name
    assert body["data"]["certificateId"] == f"CERT-{internship.id[-8:].upper()}"


@pytest.mark.asyncio
async def test_certificate_template_is_not_cached(client: AsyncClient, auth_headers, test_user, make_internship):
    internship = await make_internship(test_user, status=InternshipStatus.COMPLETED)

    response = await client.get(f"{API}/{internship.id}/certificate-template", headers=auth_headers)

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert response.headers["cache-control"] == "no-cache, no-store, must-revalidate"
    assert response.headers["x-frame-options"] == "DENY"


@pytest.mark.asyncio
async def test_certificate_preview_is_frameable(client: AsyncClient, auth_headers, test_user, make_internship):
    internship = await make_internship(test_user, status=InternshipStatus.COMPLETED)

    response = await client.get(f"{API}/{internship.id}/certificate-preview", headers=auth_headers)

    assert response.status_code == 200
    assert response.headers["x-frame-options"] == "SAMEORIGIN"


@pytest.mark.asyncio
async def test_certificate_html_download(client: AsyncClient, auth_headers, test_user, make_internship):
    internship = await make_internship(test_user, status=InternshipStatus.COMPLETED)

    response = await client.get(f"{API}/{internship.id}/certificate-download", headers=auth_headers)

    assert response.status_code == 200
    disposition = response.headers["content-disposition"]
    assert disposition.startswith('attachment; filename="certificate_')
    assert disposition.endswith(f'_{internship.id[-8:]}.html"')


@pytest.mark.asyncio
async def test_certificate_pdf(client: AsyncClient, auth_headers, test_user, make_internship, mock_rasterizer):
    test_user.name = "Asha K. Verma"
    internship = await make_internship(test_user, status=InternshipStatus.COMPLETED)

    response = await client.get(f"{API}/{internship.id}/certificate-pdf", headers=auth_headers)

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.headers["content-disposition"] == 'attachment; filename="certificate_Asha_K__Verma.pdf"'
    assert response.content.startswith(b"%PDF")
    html = mock_rasterizer.to_pdf.await_args.args[0]
    assert "Asha K. Verma" in html


@pytest.mark.asyncio
async def test_certificate_png_by_admin(client: AsyncClient, admin_auth_headers, test_user, make_internship):
    internship = await make_internship(test_user, status=InternshipStatus.COMPLETED)

    response = await client.get(f"{API}/{internship.id}/certificate-png", headers=admin_auth_headers)

    assert response.status_code == 200
    assert response.headers["content-type"] == "image/png"


@pytest.mark.asyncio
async def test_certificate_png_for_other_user(client: AsyncClient, other_auth_headers, test_user, make_internship, mock_rasterizer):
    internship = await make_internship(test_user, status=InternshipStatus.COMPLETED)

    response = await client.get(f"{API}/{internship.id}/certificate-png", headers=other_auth_headers)

    assert response.status_code == 403
    mock_rasterizer.to_png.assert_not_called()


@pytest.mark.asyncio
async def test_certificate_pdf_not_completed(client: AsyncClient, auth_headers, test_user, make_internship):
    internship = await make_internship(test_user)

    response = await client.get(f"{API}/{internship.id}/certificate-pdf", headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["error"]["details"]["status"] == "ACTIVE"


@pytest.mark.asyncio
async def test_certificate_rendering_failure(client: AsyncClient, auth_headers, test_user, make_internship, mock_rasterizer):
    mock_rasterizer.to_pdf.side_effect = RenderingError("Failed to render certificate as pdf", "pdf")
    internship = await make_internship(test_user, status=InternshipStatus.COMPLETED)

    response = await client.get(f"{API}/{internship.id}/certificate-pdf", headers=auth_headers)

    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to generate certificate"


@pytest.mark.asyncio
async def test_security_headers_and_request_id(client: AsyncClient):
    response = await client.get("/api/v1/health", headers={"X-Request-ID": "abc12345"})

    assert response.status_code == 200
    assert response.headers["x-request-id"] == "abc12345"
    assert response.headers["x-content-type-options"] == "nosniff"
