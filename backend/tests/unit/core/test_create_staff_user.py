"""
Tests for the staff seeding command
"""
import pytest
from sqlalchemy import select

from mentor_portal import create_staff_user
from mentor_portal.core.security import verify_password
from mentor_portal.models import Staff


class TestArguments:

    def test_defaults_to_hod(self):
        args = create_staff_user.parse_args(["--email", "hod@college.edu", "--name", "Dr. Rao"])

        assert args.role == "HOD"
        assert args.password is None

    def test_rejects_unknown_role(self):
        with pytest.raises(SystemExit):
            create_staff_user.parse_args(["--email", "a@b.c", "--name", "X", "--role", "DEAN"])

    def test_short_password(self, capsys):
        code = create_staff_user.main(["--email", "a@b.c", "--name", "X", "--password", "123"])

        assert code == 1
        assert "at least 6 characters" in capsys.readouterr().err


class TestCreateStaff:

    @pytest.mark.asyncio
    async def test_creates_then_resets(self, db_session):
        args = create_staff_user.parse_args([
            "--email", "Seed.HOD@College.edu", "--name", "Dr. Seed", "--department", "CSE",
        ])

        created = await create_staff_user.create_staff(args, "first-pass")
        assert created.email == "seed.hod@college.edu"
        assert created.staff_id

        reset = await create_staff_user.create_staff(args, "second-pass")
        assert reset.staff_id == created.staff_id

        rows = (await db_session.execute(select(Staff).where(Staff.email == "seed.hod@college.edu"))).scalars().all()
        assert len(rows) == 1
        assert verify_password("second-pass", rows[0].password)
