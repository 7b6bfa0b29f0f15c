"""
Create (or reset) a staff account from the command line.

Used to seed the first HOD, who can then create everyone else through the API:

    python -m mentor_portal.create_staff_user --email hod@college.edu \
        --name "Dr. A. Kumar" --role HOD --department CSE
"""
import argparse
import asyncio
import getpass
import sys
from typing import List, Optional

from sqlalchemy import select

from mentor_portal.core.database import get_session_local, init_db, close_db
from mentor_portal.core.security import get_password_hash
from mentor_portal.models import Staff
from mentor_portal.modules.auth.principal import VALID_ROLES


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create or reset a staff account")
    parser.add_argument("--email", required=True)
    parser.add_argument("--name", required=True)
    parser.add_argument("--role", default="HOD", choices=VALID_ROLES)
    parser.add_argument("--department")
    parser.add_argument("--section")
    parser.add_argument("--domain")
    parser.add_argument("--staff-id", dest="staff_id")
    parser.add_argument("--password", help="prompted for when omitted")
    return parser.parse_args(argv)


async def create_staff(args: argparse.Namespace, password: str) -> Staff:
    await init_db()

    session_local = get_session_local()
    async with session_local() as db:
        email = args.email.strip().lower()
        result = await db.execute(select(Staff).where(Staff.email == email))
        staff = result.scalar_one_or_none()

        if staff:
            staff.password = get_password_hash(password)
            staff.name = args.name
            staff.role = args.role
            staff.department = args.department or staff.department
            staff.section = args.section or staff.section
            staff.domain = args.domain or staff.domain
            print(f"Updated existing staff account: {email}")
        else:
            staff = Staff(
                email=email,
                name=args.name,
                password=get_password_hash(password),
                role=args.role,
                department=args.department,
                section=args.section,
                domain=args.domain,
            )
            if args.staff_id:
                staff.staff_id = args.staff_id
            db.add(staff)
            print(f"Created staff account: {email}")

        await db.commit()
        await db.refresh(staff)

    await close_db()
    return staff


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    password = args.password or getpass.getpass("Password: ")
    if len(password) < 6:
        print("Password must be at least 6 characters", file=sys.stderr)
        return 1

    staff = asyncio.run(create_staff(args, password))
    print(f"Staff ID: {staff.staff_id}")
    print(f"Role: {staff.role}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
