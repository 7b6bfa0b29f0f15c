"""
API tests for review, attachment and template endpoints
"""
import pytest
from httpx import AsyncClient

from conftest import make_review, make_staff, make_team, session_headers


class TestListReviews:
    """GET /api/v1/reviews"""

    @pytest.mark.asyncio
    async def test_class_advisor_sees_own_section(self, client: AsyncClient, db_session, class_advisor):
        mine = await make_review(db_session, await make_team(db_session, section="A"))
        await make_review(db_session, await make_team(db_session, section="B"))

        response = await client.get("/api/v1/reviews", headers=session_headers(class_advisor))

        assert response.status_code == 200
        reviews = response.json()["reviews"]
        assert [r["id"] for r in reviews] == [mine.id]
        assert reviews[0]["team_section"] == "A"
        assert reviews[0]["attachments"] == []


class TestUpdateReview:
    """PATCH /api/v1/reviews/update"""

    @pytest.mark.asyncio
    async def test_mentor_completes_review(self, client: AsyncClient, db_session, mentor):
        review = await make_review(db_session, await make_team(db_session, mentor=mentor.staff_id))

        response = await client.patch(
            "/api/v1/reviews/update",
            json={"review_id": review.id, "result": "Excellent", "marks": 91, "is_completed": True},
            headers=session_headers(mentor)
        )

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Review updated successfully"
        assert data["review"]["marks"] == 91
        assert data["review"]["completed_on"] is not None

    @pytest.mark.asyncio
    async def test_marks_out_of_range(self, client: AsyncClient, db_session, mentor):
        review = await make_review(db_session, await make_team(db_session, mentor=mentor.staff_id))

        response = await client.patch(
            "/api/v1/reviews/update",
            json={"review_id": review.id, "marks": 101},
            headers=session_headers(mentor)
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_result_label(self, client: AsyncClient, db_session, mentor):
        review = await make_review(db_session, await make_team(db_session, mentor=mentor.staff_id))

        response = await client.patch(
            "/api/v1/reviews/update",
            json={"review_id": review.id, "result": "Brilliant"},
            headers=session_headers(mentor)
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_review(self, client: AsyncClient, db_session, mentor):
        response = await client.patch(
            "/api/v1/reviews/update",
            json={"review_id": "missing", "marks": 50},
            headers=session_headers(mentor)
        )

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_class_advisor_cannot_evaluate(self, client: AsyncClient, db_session, class_advisor):
        review = await make_review(db_session, await make_team(db_session, section="A"))

        response = await client.patch(
            "/api/v1/reviews/update",
            json={"review_id": review.id, "marks": 50},
            headers=session_headers(class_advisor)
        )

        assert response.status_code == 403


class TestAttachments:
    """POST /api/v1/reviews/attachments"""

    @pytest.mark.asyncio
    async def test_attach_and_list(self, client: AsyncClient, db_session, mentor):
        review = await make_review(db_session, await make_team(db_session, mentor=mentor.staff_id))
        headers = session_headers(mentor)

        response = await client.post(
            "/api/v1/reviews/attachments",
            json={"review_id": review.id, "name": "Demo video", "link": "http://files.test/demo.mp4"},
            headers=headers
        )
        assert response.status_code == 201
        assert response.json()["attachment"]["attachment_name"] == "Demo video"

        listed = await client.get("/api/v1/reviews", headers=headers)
        assert [a["link"] for a in listed.json()["reviews"][0]["attachments"]] == ["http://files.test/demo.mp4"]


class TestTemplates:
    """GET/POST /api/v1/reviews/templates"""

    @pytest.mark.asyncio
    async def test_save_and_filter_by_stage(self, client: AsyncClient, db_session, hod, class_advisor):
        for stage in ("Review 1", "Review 2"):
            response = await client.post(
                "/api/v1/reviews/templates",
                json={"name": f"{stage} rubric", "link": "http://files.test/r.pdf", "review": stage},
                headers=session_headers(hod)
            )
            assert response.status_code == 201
            assert response.json()["message"] == "Template saved successfully"

        response = await client.get(
            "/api/v1/reviews/templates", params={"review": "Review 2"}, headers=session_headers(class_advisor)
        )

        assert response.status_code == 200
        assert [t["name"] for t in response.json()["templates"]] == ["Review 2 rubric"]

    @pytest.mark.asyncio
    async def test_staff_without_portal_role_sees_no_templates(self, client: AsyncClient, db_session, hod):
        response = await client.post(
            "/api/v1/reviews/templates",
            json={"name": "Review 1 rubric", "link": "http://files.test/r.pdf", "review": "Review 1"},
            headers=session_headers(hod)
        )
        assert response.status_code == 201
        guest = await make_staff(db_session, "GUEST")

        response = await client.get("/api/v1/reviews/templates", headers=session_headers(guest))

        assert response.status_code == 200
        assert response.json()["templates"] == []

    @pytest.mark.asyncio
    async def test_class_advisor_cannot_save(self, client: AsyncClient, db_session, class_advisor):
        response = await client.post(
            "/api/v1/reviews/templates",
            json={"name": "Rubric", "link": "http://files.test/r.pdf", "review": "Review 1"},
            headers=session_headers(class_advisor)
        )

        assert response.status_code == 403
        assert response.json() == {"message": "Unauthorized: Insufficient permissions"}

    @pytest.mark.asyncio
    async def test_unknown_stage(self, client: AsyncClient, db_session, hod):
        response = await client.post(
            "/api/v1/reviews/templates",
            json={"name": "Rubric", "link": "http://files.test/r.pdf", "review": "Review 9"},
            headers=session_headers(hod)
        )

        assert response.status_code == 400
