"""
Authorization policy
====================

One table decides, for every (resource, operation) pair, which role tags may
act and which rows each tag reaches. Endpoints and services never compare
role strings themselves; they call :func:`authorize` and either get a
:class:`RowFilter` back or an ``AuthorizationError``.

Scopes per role tag:

    HOD             own department
    CLASS_ADVISOR   own department, narrowed to own section when one is set
    PROJECT_MENTOR  teams whose ``mentor`` is the caller's staff code

A principal holding several tags gets the union of their scopes. A tag whose
scope needs a value the principal lacks (an HOD with no department, say)
contributes nothing, so such a caller simply sees no rows.

This module does no I/O; translating a RowFilter into SQL lives in
``mentor_portal.services.aggregation``.
"""
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple
import enum

from mentor_portal.core.exceptions import AuthorizationError
from mentor_portal.modules.auth.principal import Principal, RoleTag


class Resource(str, enum.Enum):
    TEAM = "team"
    PROJECT = "project"
    REVIEW = "review"
    REVIEW_ATTACHMENT = "review_attachment"
    REVIEW_TEMPLATE = "review_template"
    SCHEDULE = "schedule"
    LOG = "log"
    STAFF = "staff"
    DIARY = "diary"


class Operation(str, enum.Enum):
    READ = "read"
    CREATE = "create"
    APPROVE = "approve"
    ASSIGN_MENTOR = "assign_mentor"
    MENTOR_APPROVE = "mentor_approve"
    HOD_APPROVE = "hod_approve"
    EVALUATE = "evaluate"


@dataclass(frozen=True)
class Target:
    """Scope-relevant attributes of the row being acted on"""
    department: Optional[str] = None
    section: Optional[str] = None
    mentor: Optional[str] = None

    @classmethod
    def of_team(cls, team, department: Optional[str] = None) -> "Target":
        """Target for a team; `department` overrides the team's (reviews carry their own)"""
        if team is None:
            return cls(department=department)
        return cls(
            department=department or team.department,
            section=team.section,
            mentor=team.mentor,
        )


@dataclass(frozen=True)
class Scope:
    """Conjunction of equality constraints. Unset fields are unconstrained"""
    department: Optional[str] = None
    section: Optional[str] = None
    mentor: Optional[str] = None

    @property
    def unrestricted(self) -> bool:
        return self.department is None and self.section is None and self.mentor is None

    def matches(self, target: Target) -> bool:
        if self.department is not None and target.department != self.department:
            return False
        if self.section is not None and target.section != self.section:
            return False
        if self.mentor is not None and target.mentor != self.mentor:
            return False
        return True


@dataclass(frozen=True)
class RowFilter:
    """Union of scopes a principal may reach. No scopes means no rows"""
    scopes: Tuple[Scope, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.scopes

    @property
    def unrestricted(self) -> bool:
        return any(scope.unrestricted for scope in self.scopes)

    def allows(self, target: Target) -> bool:
        return any(scope.matches(target) for scope in self.scopes)


ScopeFn = Callable[[Principal], Optional[Scope]]


def own_department(principal: Principal) -> Optional[Scope]:
    if not principal.department:
        return None
    return Scope(department=principal.department)


def own_class(principal: Principal) -> Optional[Scope]:
    if not principal.department:
        return None
    return Scope(department=principal.department, section=principal.section)


def own_teams(principal: Principal) -> Optional[Scope]:
    if not principal.staff_id:
        return None
    return Scope(mentor=principal.staff_id)


def anywhere(principal: Principal) -> Optional[Scope]:
    return Scope()


@dataclass(frozen=True)
class Rule:
    grants: Dict[RoleTag, ScopeFn]
    denied: str
    out_of_scope: str
    # Listing without a granted role raises `denied` instead of returning no rows
    refuse_reads: bool = False


HOD = RoleTag.HOD
CLASS_ADVISOR = RoleTag.CLASS_ADVISOR
PROJECT_MENTOR = RoleTag.PROJECT_MENTOR

TEAM_SCOPES: Dict[RoleTag, ScopeFn] = {
    HOD: own_department,
    CLASS_ADVISOR: own_class,
    PROJECT_MENTOR: own_teams,
}

ANY_STAFF: Dict[RoleTag, ScopeFn] = {
    HOD: anywhere,
    CLASS_ADVISOR: anywhere,
    PROJECT_MENTOR: anywhere,
}

POLICY: Dict[Tuple[Resource, Operation], Rule] = {
    (Resource.TEAM, Operation.READ): Rule(
        TEAM_SCOPES,
        "You are not authorized to view teams",
        "You can only view teams in your department, section or mentorship",
    ),
    (Resource.TEAM, Operation.APPROVE): Rule(
        {HOD: own_department},
        "Only HODs can approve or reject teams",
        "You can only approve or reject teams in your department",
    ),
    (Resource.TEAM, Operation.ASSIGN_MENTOR): Rule(
        {HOD: own_department, CLASS_ADVISOR: own_class},
        "You are not authorized to assign mentors",
        "You can only assign mentors to teams in your department and section",
    ),
    (Resource.PROJECT, Operation.READ): Rule(
        TEAM_SCOPES,
        "You are not authorized to view projects",
        "You can only view projects of teams in your scope",
    ),
    (Resource.PROJECT, Operation.MENTOR_APPROVE): Rule(
        {PROJECT_MENTOR: own_teams},
        "Only project mentors can approve projects",
        "You are not the mentor of this project's team",
    ),
    (Resource.PROJECT, Operation.HOD_APPROVE): Rule(
        {HOD: own_department},
        "Only HODs can give final approval to projects",
        "You can only approve projects in your department",
    ),
    (Resource.REVIEW, Operation.READ): Rule(
        TEAM_SCOPES,
        "You are not authorized to view reviews",
        "You can only view reviews of teams in your scope",
    ),
    (Resource.REVIEW, Operation.EVALUATE): Rule(
        {HOD: own_department, PROJECT_MENTOR: own_teams},
        "You are not authorized to update reviews",
        "You are not authorized to update this review",
    ),
    (Resource.REVIEW_ATTACHMENT, Operation.CREATE): Rule(
        TEAM_SCOPES,
        "You are not authorized to add attachments",
        "You can only add attachments to reviews of teams in your scope",
    ),
    (Resource.REVIEW_TEMPLATE, Operation.READ): Rule(
        ANY_STAFF,
        "You are not authorized to view templates",
        "You are not authorized to view templates",
    ),
    (Resource.REVIEW_TEMPLATE, Operation.CREATE): Rule(
        {HOD: anywhere, PROJECT_MENTOR: anywhere},
        "Unauthorized: Insufficient permissions",
        "Unauthorized: Insufficient permissions",
    ),
    (Resource.SCHEDULE, Operation.READ): Rule(
        {HOD: own_department, CLASS_ADVISOR: own_department, PROJECT_MENTOR: own_teams},
        "You are not authorized to view schedules",
        "You can only view schedules for your department",
    ),
    (Resource.SCHEDULE, Operation.CREATE): Rule(
        {HOD: own_department, CLASS_ADVISOR: own_department},
        "Project mentors are not authorized to create schedules",
        "You can only create schedules for your own department",
    ),
    (Resource.LOG, Operation.READ): Rule(
        {PROJECT_MENTOR: own_teams},
        "Only project mentors can view student logs",
        "You are not the mentor for this team",
        refuse_reads=True,
    ),
    (Resource.LOG, Operation.APPROVE): Rule(
        {PROJECT_MENTOR: own_teams},
        "Only project mentors can approve logs",
        "You are not the mentor for this team",
    ),
    (Resource.STAFF, Operation.READ): Rule(
        ANY_STAFF,
        "You are not authorized to view staff",
        "You are not authorized to view staff",
    ),
    (Resource.STAFF, Operation.CREATE): Rule(
        {HOD: anywhere},
        "Only HODs can create staff accounts",
        "Only HODs can create staff accounts",
    ),
    (Resource.DIARY, Operation.READ): Rule(
        TEAM_SCOPES,
        "You are not authorized to generate diaries",
        "You can only generate diaries for teams in your scope",
    ),
}


def authorize(
    principal: Principal,
    resource: Resource,
    operation: Operation,
    target: Optional[Target] = None,
) -> RowFilter:
    """
    Decide whether `principal` may perform `operation` on `resource`.

    Returns the RowFilter of every scope granted to the principal's roles.
    When `target` is given it must fall inside at least one of them.

    Raises:
        AuthorizationError: no held role is granted the operation, or the
            target lies outside every granted scope.
    """
    rule = POLICY[(resource, operation)]

    held = [tag for tag in rule.grants if tag in principal.roles]
    if not held:
        raise AuthorizationError(rule.denied)

    scopes = tuple(
        scope
        for scope in (rule.grants[tag](principal) for tag in held)
        if scope is not None
    )
    row_filter = RowFilter(scopes)

    if target is not None and not row_filter.allows(target):
        raise AuthorizationError(rule.out_of_scope)

    return row_filter


def read_filter(principal: Principal, resource: Resource) -> RowFilter:
    """
    Row filter for listing `resource`.

    A caller holding none of the granted roles gets an empty filter (no rows)
    unless the rule refuses such reads outright.
    """
    rule = POLICY[(resource, Operation.READ)]
    if not rule.refuse_reads and not any(tag in principal.roles for tag in rule.grants):
        return RowFilter()
    return authorize(principal, resource, Operation.READ)
