"""Unit tests for the authorization policy table"""
import pytest

from mentor_portal.core.exceptions import AuthorizationError
from mentor_portal.modules.auth.policy import (
    POLICY,
    Operation,
    Resource,
    RowFilter,
    Scope,
    Target,
    authorize,
    read_filter,
)
from mentor_portal.modules.auth.principal import Principal, parse_roles


def make_principal(role, department="CSE", section=None, staff_id="STF0001"):
    return Principal(
        user_id="u-" + staff_id,
        staff_id=staff_id,
        email=f"{staff_id.lower()}@college.edu",
        role=role,
        department=department,
        section=section,
        roles=parse_roles(role),
    )


CSE_TEAM = Target(department="CSE", section="A", mentor="STF0001")
ECE_TEAM = Target(department="ECE", section="A", mentor="STF0001")
OTHER_MENTOR_TEAM = Target(department="CSE", section="A", mentor="STF9999")


class TestPolicyTable:

    def test_every_pair_has_messages(self):
        for rule in POLICY.values():
            assert rule.grants
            assert rule.denied
            assert rule.out_of_scope

    def test_unknown_pair_is_a_programming_error(self):
        with pytest.raises(KeyError):
            authorize(make_principal("HOD"), Resource.STAFF, Operation.EVALUATE)


class TestTeamRead:

    def test_hod_sees_own_department(self):
        row_filter = read_filter(make_principal("HOD"), Resource.TEAM)

        assert row_filter.allows(CSE_TEAM)
        assert not row_filter.allows(ECE_TEAM)

    def test_class_advisor_narrowed_to_section(self):
        row_filter = read_filter(make_principal("CLASS_ADVISOR", section="B"), Resource.TEAM)

        assert not row_filter.allows(CSE_TEAM)
        assert row_filter.allows(Target(department="CSE", section="B"))

    def test_class_advisor_without_section_sees_department(self):
        row_filter = read_filter(make_principal("CLASS_ADVISOR"), Resource.TEAM)

        assert row_filter.allows(CSE_TEAM)

    def test_mentor_sees_only_mentored_teams(self):
        row_filter = read_filter(make_principal("PROJECT_MENTOR"), Resource.TEAM)

        assert row_filter.allows(CSE_TEAM)
        assert row_filter.allows(ECE_TEAM)
        assert not row_filter.allows(OTHER_MENTOR_TEAM)

    def test_combined_roles_union_scopes(self):
        principal = make_principal("HOD+PROJECT_MENTOR", department="ECE")
        row_filter = read_filter(principal, Resource.TEAM)

        assert row_filter.allows(Target(department="ECE", mentor="STF5555"))
        assert row_filter.allows(CSE_TEAM)
        assert not row_filter.allows(OTHER_MENTOR_TEAM)

    def test_hod_without_department_sees_nothing(self):
        row_filter = read_filter(make_principal("HOD", department=None), Resource.TEAM)

        assert row_filter.is_empty
        assert not row_filter.allows(CSE_TEAM)

    @pytest.mark.parametrize("resource", [
        Resource.TEAM, Resource.PROJECT, Resource.REVIEW, Resource.SCHEDULE,
        Resource.REVIEW_TEMPLATE, Resource.STAFF,
    ])
    def test_unknown_role_lists_nothing(self, resource):
        row_filter = read_filter(make_principal("JANITOR"), resource)

        assert row_filter.is_empty

    def test_unknown_role_denied_single_team(self):
        with pytest.raises(AuthorizationError):
            authorize(make_principal("JANITOR"), Resource.TEAM, Operation.READ, CSE_TEAM)


class TestTeamMutations:

    def test_only_hod_approves_teams(self):
        authorize(make_principal("HOD"), Resource.TEAM, Operation.APPROVE, CSE_TEAM)

        with pytest.raises(AuthorizationError) as exc:
            authorize(make_principal("CLASS_ADVISOR", section="A"), Resource.TEAM, Operation.APPROVE, CSE_TEAM)
        assert exc.value.message == "Only HODs can approve or reject teams"

    def test_hod_cannot_approve_other_department(self):
        with pytest.raises(AuthorizationError):
            authorize(make_principal("HOD"), Resource.TEAM, Operation.APPROVE, ECE_TEAM)

    def test_class_advisor_assigns_in_own_section(self):
        principal = make_principal("CLASS_ADVISOR", section="A")

        authorize(principal, Resource.TEAM, Operation.ASSIGN_MENTOR, CSE_TEAM)
        with pytest.raises(AuthorizationError):
            authorize(principal, Resource.TEAM, Operation.ASSIGN_MENTOR, Target(department="CSE", section="C"))

    def test_mentor_cannot_assign(self):
        with pytest.raises(AuthorizationError):
            authorize(make_principal("PROJECT_MENTOR"), Resource.TEAM, Operation.ASSIGN_MENTOR, CSE_TEAM)


class TestProjectsAndReviews:

    def test_mentor_approves_own_team_project(self):
        principal = make_principal("PROJECT_MENTOR")

        authorize(principal, Resource.PROJECT, Operation.MENTOR_APPROVE, CSE_TEAM)
        with pytest.raises(AuthorizationError):
            authorize(principal, Resource.PROJECT, Operation.MENTOR_APPROVE, OTHER_MENTOR_TEAM)

    def test_hod_approval_is_department_scoped(self):
        authorize(make_principal("HOD"), Resource.PROJECT, Operation.HOD_APPROVE, CSE_TEAM)
        with pytest.raises(AuthorizationError):
            authorize(make_principal("HOD"), Resource.PROJECT, Operation.HOD_APPROVE, ECE_TEAM)

    def test_review_evaluation(self):
        authorize(make_principal("HOD"), Resource.REVIEW, Operation.EVALUATE, CSE_TEAM)
        authorize(make_principal("PROJECT_MENTOR"), Resource.REVIEW, Operation.EVALUATE, CSE_TEAM)

        with pytest.raises(AuthorizationError):
            authorize(make_principal("CLASS_ADVISOR", section="A"), Resource.REVIEW, Operation.EVALUATE, CSE_TEAM)
        with pytest.raises(AuthorizationError):
            authorize(make_principal("HOD"), Resource.REVIEW, Operation.EVALUATE, ECE_TEAM)


class TestSchedulesAndStaff:

    def test_class_advisor_plus_mentor_can_create_schedule(self):
        principal = make_principal("CLASS_ADVISOR+PROJECT_MENTOR", section="A")

        row_filter = authorize(principal, Resource.SCHEDULE, Operation.CREATE, Target(department="CSE"))
        assert row_filter.allows(Target(department="CSE"))

    def test_pure_mentor_cannot_create_schedule(self):
        with pytest.raises(AuthorizationError) as exc:
            authorize(make_principal("PROJECT_MENTOR"), Resource.SCHEDULE, Operation.CREATE, Target(department="CSE"))
        assert exc.value.status_code == 403

    def test_schedule_for_other_department_denied(self):
        with pytest.raises(AuthorizationError):
            authorize(make_principal("HOD"), Resource.SCHEDULE, Operation.CREATE, Target(department="ECE"))

    def test_only_hod_creates_staff(self):
        authorize(make_principal("HOD"), Resource.STAFF, Operation.CREATE)

        for role in ("CLASS_ADVISOR", "PROJECT_MENTOR", "CLASS_ADVISOR+PROJECT_MENTOR"):
            with pytest.raises(AuthorizationError):
                authorize(make_principal(role, section="A"), Resource.STAFF, Operation.CREATE)

    def test_any_staff_lists_available_staff(self):
        for role in ("HOD", "CLASS_ADVISOR", "PROJECT_MENTOR"):
            assert read_filter(make_principal(role), Resource.STAFF).unrestricted

    def test_logs_are_mentor_only(self):
        with pytest.raises(AuthorizationError):
            read_filter(make_principal("HOD"), Resource.LOG)

        assert read_filter(make_principal("HOD+PROJECT_MENTOR"), Resource.LOG).allows(CSE_TEAM)


class TestRowFilter:

    def test_empty_filter_allows_nothing(self):
        assert not RowFilter().allows(Target())
        assert RowFilter().is_empty

    def test_unrestricted_scope(self):
        row_filter = RowFilter((Scope(),))

        assert row_filter.unrestricted
        assert row_filter.allows(ECE_TEAM)

    def test_target_of_missing_team(self):
        assert Target.of_team(None) == Target()
        assert Target.of_team(None, department="CSE") == Target(department="CSE")
