import pytest

from app.models.shared.enums import (
    ApprovalStatus, MutationClass, MutationOperation, UserRole
)
from app.services.governance.authorization_policy import (
    can_resolve, can_view_queue, classify, route_approver
)


class TestClassify:
    """Direct vs deferred vs refused mutations"""

    @pytest.mark.parametrize("role,expected", [
        (UserRole.ADMIN, MutationClass.DIRECT),
        (UserRole.PLANNER, MutationClass.DIRECT),
        (UserRole.INPUTTER, MutationClass.VIA_REQUEST),
        (UserRole.VIEWER, MutationClass.DENIED),
    ])
    def test_update(self, role, expected):
        assert classify(role, 2, "operational_report", MutationOperation.UPDATE) == expected

    @pytest.mark.parametrize("role,expected", [
        (UserRole.ADMIN, MutationClass.DIRECT),
        (UserRole.PLANNER, MutationClass.DIRECT),
        (UserRole.INPUTTER, MutationClass.DENIED),
        (UserRole.VIEWER, MutationClass.DENIED),
    ])
    def test_delete(self, role, expected):
        assert classify(role, 2, "critical_issue", MutationOperation.DELETE) == expected

    def test_accepts_role_strings(self):
        assert classify("inputter", None, "safety_incident", MutationOperation.UPDATE) == MutationClass.VIA_REQUEST

    def test_unknown_role_is_denied(self):
        assert classify("contractor", None, "safety_incident", MutationOperation.UPDATE) == MutationClass.DENIED


class TestRouteApprover:
    """Who approves a request"""

    def test_inputter_goes_to_department_planner(self):
        decision = route_approver(UserRole.INPUTTER, 3, "data_change", actor_department=3)
        assert decision.approver_role == UserRole.PLANNER
        assert decision.department_id == 3
        assert decision.escalate is False
        assert decision.initial_status == ApprovalStatus.PENDING

    def test_cross_department_type_escalates_for_anyone(self):
        decision = route_approver(UserRole.INPUTTER, 3, "cross_department_change", actor_department=3)
        assert decision.escalate is True
        assert decision.approver_role == UserRole.ADMIN
        assert decision.initial_status == ApprovalStatus.PENDING_ADMIN_APPROVAL

    def test_schedule_change_by_planner_escalates(self):
        decision = route_approver(UserRole.PLANNER, 3, "maintenance_schedule_change", actor_department=3)
        assert decision.escalate is True

    def test_schedule_change_by_inputter_stays_with_planner(self):
        decision = route_approver(UserRole.INPUTTER, 3, "maintenance_schedule_change", actor_department=3)
        assert decision.escalate is False
        assert decision.approver_role == UserRole.PLANNER

    def test_planner_targeting_other_department_escalates(self):
        decision = route_approver(UserRole.PLANNER, 4, "data_change", actor_department=3)
        assert decision.escalate is True
        assert decision.department_id == 4

    def test_planner_on_site_wide_record_stays_with_planner(self):
        decision = route_approver(UserRole.PLANNER, None, "data_change", actor_department=3)
        assert decision.escalate is False
        assert decision.department_id is None


class TestCanResolve:

    def _check(self, **overrides):
        params = dict(
            actor_id=10,
            actor_role=UserRole.PLANNER,
            actor_department=3,
            status=ApprovalStatus.PENDING,
            requester_id=20,
            approver_id=None,
            request_department=3,
        )
        params.update(overrides)
        return can_resolve(**params)

    def test_department_planner_resolves_unnamed_request(self):
        assert self._check() is True

    def test_planner_of_other_department_cannot(self):
        assert self._check(actor_department=4) is False

    def test_any_planner_resolves_department_less_request(self):
        assert self._check(actor_department=4, request_department=None) is True

    def test_named_approver_only(self):
        assert self._check(approver_id=10) is True
        assert self._check(approver_id=11) is False

    def test_escalated_requests_are_admin_only(self):
        assert self._check(status=ApprovalStatus.PENDING_ADMIN_APPROVAL) is False
        assert self._check(actor_role=UserRole.ADMIN, status=ApprovalStatus.PENDING_ADMIN_APPROVAL) is True

    def test_no_self_approval_except_admin(self):
        assert self._check(requester_id=10) is False
        assert self._check(actor_role=UserRole.ADMIN, requester_id=10) is True

    def test_inputter_never_resolves(self):
        assert self._check(actor_role=UserRole.INPUTTER) is False


def test_queue_visibility():
    assert can_view_queue(UserRole.ADMIN)
    assert can_view_queue(UserRole.PLANNER)
    assert not can_view_queue(UserRole.INPUTTER)
    assert not can_view_queue(UserRole.VIEWER)
