"""
API tests for student log endpoints
"""
from datetime import date

import pytest
from httpx import AsyncClient

from conftest import make_log, make_staff, make_student, make_team, session_headers


class TestApproveLog:
    """PATCH /api/v1/logs/approve"""

    @pytest.mark.asyncio
    async def test_mentor_approves(self, client: AsyncClient, db_session, mentor):
        team = await make_team(db_session, mentor=mentor.staff_id)
        log = await make_log(db_session, await make_student(db_session, team), team)

        response = await client.patch(
            "/api/v1/logs/approve",
            json={"log_id": log.id, "approved": True, "comments": "Good progress"},
            headers=session_headers(mentor)
        )

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Log approved successfully"
        assert data["log"]["mentor_approved"] is True
        assert data["log"]["comments"] == "Good progress"

    @pytest.mark.asyncio
    async def test_repeat_decision_is_idempotent(self, client: AsyncClient, db_session, mentor):
        team = await make_team(db_session, mentor=mentor.staff_id)
        log = await make_log(db_session, await make_student(db_session, team), team, mentor_approved=False)

        response = await client.patch(
            "/api/v1/logs/approve",
            json={"log_id": log.id, "approved": False},
            headers=session_headers(mentor)
        )

        assert response.status_code == 200
        assert response.json()["message"] == "Log rejected successfully"

    @pytest.mark.asyncio
    async def test_reversing_a_decision(self, client: AsyncClient, db_session, mentor):
        team = await make_team(db_session, mentor=mentor.staff_id)
        log = await make_log(db_session, await make_student(db_session, team), team, mentor_approved=True)

        response = await client.patch(
            "/api/v1/logs/approve",
            json={"log_id": log.id, "approved": False},
            headers=session_headers(mentor)
        )

        assert response.status_code == 400
        assert response.json() == {"message": "Log has already been approved"}

    @pytest.mark.asyncio
    async def test_other_mentor(self, client: AsyncClient, db_session, mentor, other_mentor):
        team = await make_team(db_session, mentor=mentor.staff_id)
        log = await make_log(db_session, await make_student(db_session, team), team)

        response = await client.patch(
            "/api/v1/logs/approve",
            json={"log_id": log.id, "approved": True},
            headers=session_headers(other_mentor)
        )

        assert response.status_code == 403
        assert response.json() == {"message": "You are not the mentor for this team"}

    @pytest.mark.asyncio
    async def test_hod_cannot_approve(self, client: AsyncClient, db_session, hod):
        response = await client.patch(
            "/api/v1/logs/approve",
            json={"log_id": "any", "approved": True},
            headers=session_headers(hod)
        )

        assert response.status_code == 403
        assert response.json() == {"message": "Only project mentors can approve logs"}

    @pytest.mark.asyncio
    async def test_unknown_log(self, client: AsyncClient, mentor):
        response = await client.patch(
            "/api/v1/logs/approve",
            json={"log_id": "missing", "approved": True},
            headers=session_headers(mentor)
        )

        assert response.status_code == 404


class TestLogViews:
    """GET /api/v1/logs/pending, /student and /students"""

    @pytest.mark.asyncio
    async def test_pending_only_undecided_in_own_teams(self, client: AsyncClient, db_session, mentor, other_mentor):
        team = await make_team(db_session, mentor=mentor.staff_id)
        student = await make_student(db_session, team, name="Asha Rao")
        pending = await make_log(db_session, student, team)
        await make_log(db_session, student, team, mentor_approved=True)
        foreign = await make_team(db_session, mentor=other_mentor.staff_id)
        await make_log(db_session, await make_student(db_session, foreign), foreign)

        response = await client.get("/api/v1/logs/pending", headers=session_headers(mentor))

        assert response.status_code == 200
        logs = response.json()["logs"]
        assert [log["id"] for log in logs] == [pending.id]
        assert logs[0]["student_name"] == "Asha Rao"
        assert logs[0]["team_code"] == team.code

    @pytest.mark.asyncio
    async def test_student_logs_latest_first(self, client: AsyncClient, db_session, mentor):
        team = await make_team(db_session, mentor=mentor.staff_id)
        student = await make_student(db_session, team)
        older = await make_log(db_session, student, team, on=date(2024, 1, 10))
        newer = await make_log(db_session, student, team, on=date(2024, 1, 20))

        response = await client.get(
            "/api/v1/logs/student", params={"student_id": student.student_id}, headers=session_headers(mentor)
        )

        assert response.status_code == 200
        data = response.json()
        assert data["student"]["name"] == student.name
        assert [log["id"] for log in data["logs"]] == [newer.id, older.id]

    @pytest.mark.asyncio
    async def test_unknown_student(self, client: AsyncClient, mentor):
        response = await client.get(
            "/api/v1/logs/student", params={"student_id": "STU-NONE"}, headers=session_headers(mentor)
        )

        assert response.status_code == 404
        assert response.json() == {"message": "Student not found"}

    @pytest.mark.asyncio
    async def test_students_with_logs(self, client: AsyncClient, db_session, mentor):
        team = await make_team(db_session, mentor=mentor.staff_id)
        zara = await make_student(db_session, team, name="Zara")
        amit = await make_student(db_session, team, name="Amit")
        await make_student(db_session, team, name="Silent")
        for student in (zara, amit, zara):
            await make_log(db_session, student, team)

        response = await client.get("/api/v1/logs/students", headers=session_headers(mentor))

        assert response.status_code == 200
        assert [s["name"] for s in response.json()["students"]] == ["Amit", "Zara"]

    @pytest.mark.asyncio
    async def test_class_advisor_forbidden(self, client: AsyncClient, class_advisor):
        response = await client.get("/api/v1/logs/pending", headers=session_headers(class_advisor))

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_staff_without_portal_role_forbidden(self, client: AsyncClient, db_session):
        guest = await make_staff(db_session, "GUEST")

        response = await client.get("/api/v1/logs/pending", headers=session_headers(guest))

        assert response.status_code == 403
