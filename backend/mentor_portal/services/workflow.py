"""
Workflow service
================

State transitions for teams, projects, logs, reviews and schedules, plus
staff and template creation. Each function authorizes first, applies the
change and commits once.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from mentor_portal.core.exceptions import (
    ConflictError,
    StaffNotFoundError,
    UpstreamError,
    ValidationError,
)
from mentor_portal.core.logging_config import logger
from mentor_portal.core.security import get_password_hash
from mentor_portal.models import (
    Staff,
    Team,
    Project,
    Review,
    ReviewAttachment,
    ReviewTemplate,
    Schedule,
    Log,
)
from mentor_portal.modules.auth.policy import Resource, Operation, Target, authorize
from mentor_portal.modules.auth.principal import (
    Principal,
    RoleTag,
    VALID_ROLES,
    parse_roles,
)
from mentor_portal.schemas.review import AttachmentCreate, ReviewUpdate, ScheduleCreate, TemplateCreate
from mentor_portal.schemas.staff import StaffCreate
from mentor_portal.services.aggregation import (
    find_one,
    load_log,
    load_one,
    load_project,
    load_review,
    load_team,
    scope_team,
)


async def _commit(db: AsyncSession, operation: str, *rows) -> None:
    """Commit the unit of work and refresh `rows`. Store failures become UpstreamError"""
    try:
        await db.commit()
        for row in rows:
            await db.refresh(row)
    except IntegrityError:
        await db.rollback()
        raise
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.log_error_with_context(exc, context=operation)
        raise UpstreamError(f"Failed to {operation}", operation=operation) from exc


def _decision(value: bool) -> str:
    return "approved" if value else "rejected"


# ==================== Teams ====================

async def set_team_approval(
    db: AsyncSession, principal: Principal, team_id: str, is_approved: bool
) -> Team:
    team = await load_team(db, team_id)
    authorize(principal, Resource.TEAM, Operation.APPROVE, Target.of_team(team))

    previous = team.is_approved
    team.is_approved = is_approved
    await _commit(db, "update team approval", team)

    logger.log_workflow_event(
        "team", team.team_id, f"{previous} -> {is_approved}", actor=principal.staff_id
    )
    return team


async def assign_mentor(
    db: AsyncSession, principal: Principal, team_id: str, mentor_id: str
) -> Team:
    """Point a team at a mentor's staff code"""
    team = await load_team(db, team_id)
    authorize(principal, Resource.TEAM, Operation.ASSIGN_MENTOR, Target.of_team(team))

    mentor = await load_one(db, Staff, Staff.staff_id, mentor_id, StaffNotFoundError)

    previous = team.mentor
    team.mentor = mentor.staff_id
    await _commit(db, "assign mentor", team)

    logger.log_workflow_event(
        "team", team.team_id, "assign_mentor",
        actor=principal.staff_id, previous_mentor=previous, mentor=mentor.staff_id,
    )
    return team


# ==================== Projects ====================

async def approve_project_by_mentor(
    db: AsyncSession, principal: Principal, project_id: str, approved: bool
) -> Project:
    """
    First approval stage.

    Withdrawing mentor approval also withdraws any HOD approval, since the
    latter is only valid on top of the former.
    """
    project = await load_project(db, project_id)
    team = await scope_team(db, project.team_id)
    authorize(principal, Resource.PROJECT, Operation.MENTOR_APPROVE, Target.of_team(team))

    project.is_approved = approved
    if not approved:
        project.is_hod_approved = False
    await _commit(db, "update project approval", project)

    logger.log_workflow_event(
        "project", project.project_id, f"mentor_approved={approved}", actor=principal.staff_id
    )
    return project


async def approve_project_by_hod(
    db: AsyncSession, principal: Principal, project_id: str, approved: bool
) -> Project:
    project = await load_project(db, project_id)
    if not project.is_approved:
        raise ValidationError("Project must have mentor approval before HOD approval", field="project_id")

    team = await scope_team(db, project.team_id)
    authorize(principal, Resource.PROJECT, Operation.HOD_APPROVE, Target.of_team(team))

    project.is_hod_approved = approved
    await _commit(db, "update project approval", project)

    logger.log_workflow_event(
        "project", project.project_id, f"hod_approved={approved}", actor=principal.staff_id
    )
    return project


# ==================== Logs ====================

async def approve_log(
    db: AsyncSession,
    principal: Principal,
    log_id: str,
    approved: bool,
    comments: Optional[str] = None,
) -> Log:
    """
    Record the mentor's decision on a log.

    The decision is made once. Sending the same decision again only updates
    the comments; sending the opposite one is rejected.
    """
    authorize(principal, Resource.LOG, Operation.APPROVE)

    log = await load_log(db, log_id)
    team = await scope_team(db, log.team_id)
    authorize(principal, Resource.LOG, Operation.APPROVE, Target.of_team(team))

    if log.mentor_approved is not None and log.mentor_approved != approved:
        raise ValidationError(f"Log has already been {_decision(log.mentor_approved)}", field="approved")

    log.mentor_approved = approved
    if comments is not None:
        log.comments = comments
    await _commit(db, "update log approval", log)

    logger.log_workflow_event("log", log.id, _decision(approved), actor=principal.staff_id)
    return log


# ==================== Reviews ====================

async def evaluate_review(db: AsyncSession, principal: Principal, data: ReviewUpdate) -> Review:
    review = await load_review(db, data.review_id)
    team = await scope_team(db, review.team_id)
    authorize(
        principal, Resource.REVIEW, Operation.EVALUATE,
        Target.of_team(team, department=review.department),
    )

    if data.result is not None:
        review.result = data.result.value
    if data.marks is not None:
        review.marks = data.marks
    if data.is_completed is True:
        review.is_completed = True
        if review.completed_on is None:
            review.completed_on = datetime.utcnow()
    elif data.is_completed is False:
        review.is_completed = False
        review.completed_on = None

    await _commit(db, "update review", review)

    logger.log_workflow_event(
        "review", review.id, "evaluate",
        actor=principal.staff_id, result=review.result, marks=review.marks,
        is_completed=review.is_completed,
    )
    return review


async def add_review_attachment(
    db: AsyncSession, principal: Principal, data: AttachmentCreate
) -> ReviewAttachment:
    review = await load_review(db, data.review_id)
    team = await scope_team(db, review.team_id)
    authorize(
        principal, Resource.REVIEW_ATTACHMENT, Operation.CREATE,
        Target.of_team(team, department=review.department),
    )

    attachment = ReviewAttachment(
        review_id=review.id,
        attachment_name=data.name,
        link=data.link,
    )
    db.add(attachment)
    await _commit(db, "add review attachment", attachment)

    logger.log_workflow_event("review", review.id, "attach", actor=principal.staff_id, name=data.name)
    return attachment


async def create_review_template(
    db: AsyncSession, principal: Principal, data: TemplateCreate
) -> ReviewTemplate:
    authorize(principal, Resource.REVIEW_TEMPLATE, Operation.CREATE)

    template = ReviewTemplate(name=data.name, link=data.link, review=data.review.value)
    db.add(template)
    await _commit(db, "save template", template)

    logger.log_workflow_event("template", template.id, "create", actor=principal.staff_id, stage=template.review)
    return template


# ==================== Schedules ====================

@dataclass
class ScheduleOutcome:
    schedule: Schedule
    teams_scheduled: int
    reviews_created: int

    @property
    def message(self) -> str:
        if self.teams_scheduled == 0:
            return "Schedule created successfully, but no approved teams found in this department"
        return "Schedule and review entries created successfully"


async def create_schedule(db: AsyncSession, principal: Principal, data: ScheduleCreate) -> ScheduleOutcome:
    """
    Open a review window and create one pending Review per approved team.

    A class advisor who is not also an HOD only schedules their own section.
    The schedule and its reviews are written in one transaction.
    """
    authorize(principal, Resource.SCHEDULE, Operation.CREATE)

    if data.end <= data.start:
        raise ValidationError("End date must be after start date", field="end")

    authorize(principal, Resource.SCHEDULE, Operation.CREATE, Target(department=data.department))

    stmt = select(Team).where(Team.department == data.department, Team.is_approved.is_(True))
    if (
        principal.has(RoleTag.CLASS_ADVISOR)
        and not principal.has(RoleTag.HOD)
        and principal.section
    ):
        stmt = stmt.where(Team.section == principal.section)

    try:
        teams = list((await db.execute(stmt)).scalars().all())
    except SQLAlchemyError as exc:
        logger.log_error_with_context(exc, context="fetch approved teams")
        raise UpstreamError("Failed to fetch approved teams", operation="schedule") from exc

    stage = data.stage.value
    schedule = Schedule(stage=stage, department=data.department, start=data.start, end=data.end)
    db.add(schedule)
    for team in teams:
        db.add(Review(team_id=team.team_id, stage=stage, department=data.department, is_completed=False))

    await _commit(db, "create schedule", schedule)

    logger.log_workflow_event(
        "schedule", schedule.id, "create",
        actor=principal.staff_id, department=data.department, stage=stage, teams=len(teams),
    )
    return ScheduleOutcome(schedule=schedule, teams_scheduled=len(teams), reviews_created=len(teams))


# ==================== Staff ====================

def _check_role_fields(data: StaffCreate) -> None:
    if data.role not in VALID_ROLES:
        raise ValidationError("Invalid role", field="role")

    tags = parse_roles(data.role)
    if tags & {RoleTag.HOD, RoleTag.CLASS_ADVISOR} and not data.department:
        raise ValidationError("Department is required for HOD and CLASS_ADVISOR roles", field="department")
    if RoleTag.CLASS_ADVISOR in tags and not data.section:
        raise ValidationError("Section is required for CLASS_ADVISOR role", field="section")
    if RoleTag.PROJECT_MENTOR in tags and not data.domain:
        raise ValidationError("Domain is required for PROJECT_MENTOR role", field="domain")


async def create_staff(db: AsyncSession, principal: Principal, data: StaffCreate) -> Staff:
    authorize(principal, Resource.STAFF, Operation.CREATE)
    _check_role_fields(data)

    email = data.email.lower()
    if await find_one(db, Staff, Staff.email, email) is not None:
        raise ConflictError("Email already in use", field="email")
    if data.staff_id and await find_one(db, Staff, Staff.staff_id, data.staff_id) is not None:
        raise ConflictError("Staff ID already in use", field="staff_id")

    staff = Staff(
        name=data.name,
        email=email,
        password=get_password_hash(data.password),
        role=data.role,
        department=data.department,
        section=data.section,
        domain=data.domain,
        ie_allocated=data.ie_allocated,
    )
    if data.staff_id:
        staff.staff_id = data.staff_id
    db.add(staff)

    try:
        await _commit(db, "create staff", staff)
    except IntegrityError as exc:
        logger.warning(f"[Staff] Duplicate staff rejected by the store: {exc}")
        raise ConflictError("Email already in use", field="email") from exc

    logger.log_workflow_event("staff", staff.staff_id, "create", actor=principal.staff_id, role=staff.role)
    return staff
