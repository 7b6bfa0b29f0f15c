"""
Aggregation service
===================

Builds the denormalized views the dashboard reads: team, project and review
lists, detail views, log queues and the diary data set.

Rules every function here follows:

- The primary row is loaded first. If it is missing the call raises the
  matching ``*NotFoundError``; if the store fails it raises ``UpstreamError``.
  The team that decides a row's scope is loaded the same way (``scope_team``).
- Related rows (mentor, team lead, attachments, ...) are fetched with one
  batched ``IN`` query per relation. A missing related row becomes ``None``;
  a failing related query is logged and treated as empty.
- Lists for dashboards are newest first. Diary data is chronological.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Type

from sqlalchemy import select, func, and_, or_, true, false
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from mentor_portal.core.config import settings
from mentor_portal.core.exceptions import (
    ResourceNotFoundError,
    TeamNotFoundError,
    ProjectNotFoundError,
    ReviewNotFoundError,
    LogNotFoundError,
    StudentNotFoundError,
    UpstreamError,
)
from mentor_portal.core.logging_config import logger
from mentor_portal.models import (
    Staff,
    Student,
    Team,
    Project,
    Review,
    ReviewAttachment,
    ReviewTemplate,
    Schedule,
    Log,
)
from mentor_portal.modules.auth.policy import (
    Resource,
    Operation,
    RowFilter,
    Target,
    authorize,
    read_filter,
)
from mentor_portal.modules.auth.principal import Principal, RoleTag, parse_roles
from mentor_portal.schemas.log import (
    PendingLogItem,
    StudentLogItem,
    StudentSummary,
)
from mentor_portal.schemas.project import ProjectListItem, ProjectResponse, ProjectDetailResponse
from mentor_portal.schemas.review import (
    AttachmentResponse,
    ReviewListItem,
    ReviewResponse,
    ScheduleResponse,
    TemplateResponse,
)
from mentor_portal.schemas.staff import AvailableStaff, StaffSummary
from mentor_portal.schemas.team import (
    StudentResponse,
    TeamDetailResponse,
    TeamListItem,
    TeamResponse,
)


# ==================== Row filters as SQL ====================

def scope_clause(row_filter: RowFilter, department_col, section_col, mentor_col):
    """OR of the filter's scopes over the given columns"""
    if row_filter.is_empty:
        return false()
    if row_filter.unrestricted:
        return true()

    clauses = []
    for scope in row_filter.scopes:
        parts = []
        if scope.department is not None:
            parts.append(department_col == scope.department)
        if scope.section is not None:
            parts.append(section_col == scope.section)
        if scope.mentor is not None:
            parts.append(mentor_col == scope.mentor)
        clauses.append(and_(*parts))
    return or_(*clauses)


def team_clause(row_filter: RowFilter):
    return scope_clause(row_filter, Team.department, Team.section, Team.mentor)


def review_clause(row_filter: RowFilter):
    # Department comes from the review row; section and mentor from its team
    return scope_clause(row_filter, Review.department, Team.section, Team.mentor)


def schedule_clause(row_filter: RowFilter):
    """Schedules only carry a department; a mentor sees the departments of their teams"""
    if row_filter.is_empty:
        return false()

    clauses = []
    for scope in row_filter.scopes:
        if scope.mentor is not None:
            mentored = select(Team.department).where(Team.mentor == scope.mentor)
            clauses.append(Schedule.department.in_(mentored))
        elif scope.department is not None:
            clauses.append(Schedule.department == scope.department)
        else:
            return true()
    return or_(*clauses)


# ==================== Query helpers ====================

async def _all(db: AsyncSession, stmt, operation: str) -> List[Any]:
    """Primary list query: store failures are fatal"""
    try:
        result = await db.execute(stmt)
    except SQLAlchemyError as exc:
        logger.log_error_with_context(exc, context=f"fetch {operation}")
        raise UpstreamError(f"Failed to fetch {operation}", operation=operation) from exc
    return list(result.scalars().all())


async def _rows(db: AsyncSession, stmt, operation: str) -> List[Any]:
    """Primary multi-entity query returning row tuples"""
    try:
        result = await db.execute(stmt)
    except SQLAlchemyError as exc:
        logger.log_error_with_context(exc, context=f"fetch {operation}")
        raise UpstreamError(f"Failed to fetch {operation}", operation=operation) from exc
    return list(result.all())


async def find_one(db: AsyncSession, model: Type[Any], column, value: Any):
    """First row with `column == value`, or None. Store failures raise UpstreamError"""
    try:
        result = await db.execute(select(model).where(column == value))
    except SQLAlchemyError as exc:
        logger.log_error_with_context(exc, context=f"load {model.__tablename__}")
        raise UpstreamError(f"Failed to fetch {model.__tablename__}", operation=model.__tablename__) from exc
    return result.scalars().first()


async def load_one(
    db: AsyncSession,
    model: Type[Any],
    column,
    value: Any,
    not_found: Type[ResourceNotFoundError],
):
    """Load a primary row by key or raise `not_found`"""
    row = await find_one(db, model, column, value)
    if row is None:
        raise not_found(value)
    return row


async def scope_team(db: AsyncSession, team_id: Optional[str]) -> Optional[Team]:
    """
    Team that decides whether a project, review or log is in scope.

    A dangling reference yields None (the row is then outside every scope),
    but a store failure raises UpstreamError like a primary load.
    """
    if not team_id:
        return None
    return await find_one(db, Team, Team.team_id, team_id)


async def load_team(db: AsyncSession, team_id: str) -> Team:
    return await load_one(db, Team, Team.team_id, team_id, TeamNotFoundError)


async def load_project(db: AsyncSession, project_id: str) -> Project:
    return await load_one(db, Project, Project.project_id, project_id, ProjectNotFoundError)


async def load_review(db: AsyncSession, review_id: str) -> Review:
    return await load_one(db, Review, Review.id, review_id, ReviewNotFoundError)


async def load_log(db: AsyncSession, log_id: str) -> Log:
    return await load_one(db, Log, Log.id, log_id, LogNotFoundError)


async def lookup(db: AsyncSession, column, keys: Iterable[Any], what: str) -> Dict[Any, Any]:
    """
    Batched secondary lookup keyed by `column`.

    Keys with no row are simply absent from the result. A failing query is
    logged and yields an empty mapping.
    """
    wanted = {key for key in keys if key}
    if not wanted:
        return {}

    model = column.class_
    try:
        result = await db.execute(select(model).where(column.in_(wanted)))
    except SQLAlchemyError as exc:
        logger.warning(
            f"[Aggregation] {what} lookup failed, continuing without it: {exc}",
            extra={"event_type": "aggregation_degraded", "relation": what},
        )
        return {}
    return {getattr(row, column.key): row for row in result.scalars().all()}


async def secondary_list(db: AsyncSession, stmt, what: str) -> List[Any]:
    """Secondary list query. Failures are logged and yield []"""
    try:
        result = await db.execute(stmt)
    except SQLAlchemyError as exc:
        logger.warning(
            f"[Aggregation] {what} query failed, continuing without it: {exc}",
            extra={"event_type": "aggregation_degraded", "relation": what},
        )
        return []
    return list(result.scalars().all())


def _name(row: Optional[Any]) -> Optional[str]:
    return row.name if row is not None else None


async def _scoped_team_ids(db: AsyncSession, row_filter: RowFilter) -> Dict[str, Team]:
    if row_filter.is_empty:
        return {}
    teams = await _all(db, select(Team).where(team_clause(row_filter)), "mentor teams")
    return {team.team_id: team for team in teams}


# ==================== Teams ====================

async def list_teams(db: AsyncSession, principal: Principal) -> List[TeamListItem]:
    row_filter = read_filter(principal, Resource.TEAM)
    if row_filter.is_empty:
        return []

    teams = await _all(
        db,
        select(Team).where(team_clause(row_filter)).order_by(Team.created_at.desc()),
        "teams",
    )

    mentors = await lookup(db, Staff.staff_id, (t.mentor for t in teams), "mentor")
    leads = await lookup(db, Student.student_id, (t.team_lead for t in teams), "team lead")

    return [
        TeamListItem.model_validate(team).model_copy(update={
            "mentor_name": _name(mentors.get(team.mentor)),
            "team_lead_name": _name(leads.get(team.team_lead)),
        })
        for team in teams
    ]


async def team_detail(db: AsyncSession, principal: Principal, team_id: str) -> TeamDetailResponse:
    team = await load_team(db, team_id)
    authorize(principal, Resource.TEAM, Operation.READ, Target.of_team(team))

    lead = (await lookup(db, Student.student_id, [team.team_lead], "team lead")).get(team.team_lead)
    mentor = (await lookup(db, Staff.staff_id, [team.mentor], "mentor")).get(team.mentor)

    reviews = await secondary_list(
        db,
        select(Review).where(Review.team_id == team.team_id).order_by(Review.created_at.desc()),
        "team reviews",
    )
    schedules = await secondary_list(
        db,
        select(Schedule).where(Schedule.department == team.department).order_by(Schedule.created_at.desc()),
        "department schedules",
    )

    return TeamDetailResponse(
        team=TeamResponse.model_validate(team),
        team_lead=StudentResponse.model_validate(lead) if lead else None,
        mentor=StaffSummary.model_validate(mentor) if mentor else None,
        reviews=[ReviewResponse.model_validate(r) for r in reviews],
        schedules=[ScheduleResponse.model_validate(s) for s in schedules],
    )


# ==================== Projects ====================

async def list_projects(db: AsyncSession, principal: Principal) -> List[ProjectListItem]:
    row_filter = read_filter(principal, Resource.PROJECT)
    if row_filter.is_empty:
        return []

    rows = await _rows(
        db,
        select(Project, Team)
        .join(Team, Team.team_id == Project.team_id)
        .where(team_clause(row_filter))
        .order_by(Project.created_at.desc()),
        "projects",
    )

    teams = [team for _, team in rows]
    mentors = await lookup(db, Staff.staff_id, (t.mentor for t in teams), "mentor")
    leads = await lookup(db, Student.student_id, (t.team_lead for t in teams), "team lead")

    return [
        ProjectListItem.model_validate(project).model_copy(update={
            "team_department": team.department,
            "team_section": team.section,
            "team_lead_name": _name(leads.get(team.team_lead)),
            "mentor_name": _name(mentors.get(team.mentor)),
            "mentor_id": team.mentor,
        })
        for project, team in rows
    ]


async def project_detail(db: AsyncSession, principal: Principal, project_id: str) -> ProjectDetailResponse:
    project = await load_project(db, project_id)
    team = await scope_team(db, project.team_id)
    authorize(principal, Resource.PROJECT, Operation.READ, Target.of_team(team))

    lead = mentor = None
    reviews: List[Review] = []
    if team is not None:
        lead = (await lookup(db, Student.student_id, [team.team_lead], "team lead")).get(team.team_lead)
        mentor = (await lookup(db, Staff.staff_id, [team.mentor], "mentor")).get(team.mentor)
        reviews = await secondary_list(
            db,
            select(Review).where(Review.team_id == team.team_id).order_by(Review.created_at.desc()),
            "team reviews",
        )

    return ProjectDetailResponse(
        project=ProjectResponse.model_validate(project),
        team=TeamResponse.model_validate(team) if team else None,
        team_lead=StudentResponse.model_validate(lead) if lead else None,
        mentor=StaffSummary.model_validate(mentor) if mentor else None,
        reviews=[ReviewResponse.model_validate(r) for r in reviews],
    )


# ==================== Reviews, schedules, templates ====================

async def list_reviews(db: AsyncSession, principal: Principal) -> List[ReviewListItem]:
    row_filter = read_filter(principal, Resource.REVIEW)
    if row_filter.is_empty:
        return []

    rows = await _rows(
        db,
        select(Review, Team)
        .outerjoin(Team, Team.team_id == Review.team_id)
        .where(review_clause(row_filter))
        .order_by(Review.created_at.desc()),
        "reviews",
    )

    leads = await lookup(
        db, Student.student_id, (team.team_lead for _, team in rows if team is not None), "team lead"
    )
    attachments: Dict[str, List[ReviewAttachment]] = {}
    review_ids = [review.id for review, _ in rows]
    if review_ids:
        for attachment in await secondary_list(
            db,
            select(ReviewAttachment)
            .where(ReviewAttachment.review_id.in_(review_ids))
            .order_by(ReviewAttachment.created_at.desc()),
            "review attachments",
        ):
            attachments.setdefault(attachment.review_id, []).append(attachment)

    items = []
    for review, team in rows:
        update: Dict[str, Any] = {
            "attachments": [AttachmentResponse.model_validate(a) for a in attachments.get(review.id, [])],
        }
        if team is not None:
            update.update({
                "team_topic": team.topic,
                "team_code": team.code,
                "team_section": team.section,
                "team_lead_id": team.team_lead,
                "team_lead_name": _name(leads.get(team.team_lead)),
            })
        items.append(ReviewListItem.model_validate(review).model_copy(update=update))
    return items


async def list_schedules(db: AsyncSession, principal: Principal) -> List[ScheduleResponse]:
    row_filter = read_filter(principal, Resource.SCHEDULE)
    if row_filter.is_empty:
        return []

    schedules = await _all(
        db,
        select(Schedule).where(schedule_clause(row_filter)).order_by(Schedule.created_at.desc()),
        "schedules",
    )
    return [ScheduleResponse.model_validate(s) for s in schedules]


async def list_templates(
    db: AsyncSession, principal: Principal, review: Optional[str] = None
) -> List[TemplateResponse]:
    if read_filter(principal, Resource.REVIEW_TEMPLATE).is_empty:
        return []

    stmt = select(ReviewTemplate)
    if review:
        stmt = stmt.where(ReviewTemplate.review == review)
    templates = await _all(db, stmt.order_by(ReviewTemplate.created_at.desc()), "templates")
    return [TemplateResponse.model_validate(t) for t in templates]


# ==================== Logs ====================

async def pending_logs(db: AsyncSession, principal: Principal) -> List[PendingLogItem]:
    """Logs awaiting a decision from the caller, newest first"""
    teams = await _scoped_team_ids(db, read_filter(principal, Resource.LOG))
    if not teams:
        return []

    logs = await _all(
        db,
        select(Log)
        .where(Log.team_id.in_(list(teams)), Log.mentor_approved.is_(None))
        .order_by(Log.created_at.desc()),
        "logs",
    )
    students = await lookup(db, Student.student_id, (log.student_id for log in logs), "student")

    return [
        PendingLogItem(
            id=log.id,
            created_at=log.created_at,
            date=log.date,
            expected_task=log.expected_task,
            completed_task=log.completed_task,
            comments=log.comments,
            student_id=log.student_id,
            student_name=_name(students.get(log.student_id)) or "Unknown Student",
            team_id=log.team_id,
            team_topic=teams[log.team_id].topic,
            team_code=teams[log.team_id].code,
        )
        for log in logs
    ]


async def student_logs(db: AsyncSession, principal: Principal, student_id: str):
    """One student's logs within the caller's teams, latest date first"""
    row_filter = read_filter(principal, Resource.LOG)
    student = await load_one(db, Student, Student.student_id, student_id, StudentNotFoundError)

    teams = await _scoped_team_ids(db, row_filter)
    logs: List[Log] = []
    if teams:
        logs = await _all(
            db,
            select(Log)
            .where(Log.student_id == student_id, Log.team_id.in_(list(teams)))
            .order_by(Log.date.desc(), Log.created_at.desc()),
            "student logs",
        )

    items = [
        StudentLogItem(
            id=log.id,
            created_at=log.created_at,
            date=log.date,
            expected_task=log.expected_task,
            completed_task=log.completed_task,
            comments=log.comments,
            mentor_approved=log.mentor_approved,
            team_id=log.team_id,
            team_topic=teams[log.team_id].topic,
            team_code=teams[log.team_id].code,
        )
        for log in logs
    ]
    return StudentSummary.model_validate(student), items


async def mentor_students(db: AsyncSession, principal: Principal) -> List[StudentSummary]:
    """Distinct students who logged work in the caller's teams, by name"""
    teams = await _scoped_team_ids(db, read_filter(principal, Resource.LOG))
    if not teams:
        return []

    student_ids = select(Log.student_id).where(Log.team_id.in_(list(teams))).distinct()
    students = await _all(
        db,
        select(Student).where(Student.student_id.in_(student_ids)).order_by(Student.name),
        "students",
    )
    return [StudentSummary.model_validate(s) for s in students]


# ==================== Staff ====================

async def available_staff(db: AsyncSession, principal: Principal) -> List[AvailableStaff]:
    """Mentors carrying fewer than MAX_TEAMS_PER_MENTOR teams, by name"""
    if read_filter(principal, Resource.STAFF).is_empty:
        return []

    counts: Dict[str, int] = {}
    try:
        result = await db.execute(
            select(Team.mentor, func.count(Team.team_id))
            .where(Team.mentor.isnot(None))
            .group_by(Team.mentor)
        )
        counts = {mentor: count for mentor, count in result.all()}
    except SQLAlchemyError as exc:
        logger.log_error_with_context(exc, context="count teams per mentor")
        raise UpstreamError("Failed to count teams per mentor", operation="staff") from exc

    staff = await _all(db, select(Staff).order_by(Staff.name), "staff")

    available = []
    for member in staff:
        if RoleTag.PROJECT_MENTOR not in parse_roles(member.role):
            continue
        team_count = counts.get(member.staff_id, 0)
        if team_count < settings.MAX_TEAMS_PER_MENTOR:
            available.append(
                AvailableStaff.model_validate(member).model_copy(update={"team_count": team_count})
            )
    return available


# ==================== Diary ====================

@dataclass
class DiaryData:
    """Everything the diary builder needs for one team"""
    team: Team
    students: List[Student] = field(default_factory=list)
    team_lead: Optional[Student] = None
    mentor: Optional[Staff] = None
    logs: List[Log] = field(default_factory=list)
    log_students: Dict[str, Student] = field(default_factory=dict)
    reviews: List[Review] = field(default_factory=list)
    project: Optional[Project] = None


async def diary_data(db: AsyncSession, principal: Principal, team_id: str) -> DiaryData:
    team = await load_team(db, team_id)
    authorize(principal, Resource.DIARY, Operation.READ, Target.of_team(team))

    students = await secondary_list(
        db,
        select(Student).where(Student.team_id == team.team_id).order_by(Student.register_number, Student.name),
        "team members",
    )
    lead = (await lookup(db, Student.student_id, [team.team_lead], "team lead")).get(team.team_lead)
    mentor = (await lookup(db, Staff.staff_id, [team.mentor], "mentor")).get(team.mentor)

    logs = await secondary_list(
        db,
        select(Log).where(Log.team_id == team.team_id).order_by(Log.date.asc(), Log.created_at.asc()),
        "team logs",
    )
    log_students = {s.student_id: s for s in students}
    missing = {log.student_id for log in logs} - set(log_students)
    log_students.update(await lookup(db, Student.student_id, missing, "log student"))

    reviews = await secondary_list(
        db,
        select(Review).where(Review.team_id == team.team_id).order_by(Review.created_at.asc()),
        "team reviews",
    )
    projects = await secondary_list(
        db,
        select(Project).where(Project.team_id == team.team_id).order_by(Project.created_at.desc()).limit(1),
        "team project",
    )

    return DiaryData(
        team=team,
        students=students,
        team_lead=lead,
        mentor=mentor,
        logs=logs,
        log_students=log_students,
        reviews=reviews,
        project=projects[0] if projects else None,
    )
