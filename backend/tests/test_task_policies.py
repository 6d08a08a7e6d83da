# tests/test_task_policies.py
"""
Truth tables for the task workflow policies.

Policies only compare ids, so plain namespaces stand in for the actor,
the task and the project. Each role flag says whether the actor holds
that role on the task.
"""

import itertools
from types import SimpleNamespace

import pytest
from django.core.exceptions import ImproperlyConfigured

from tasks.policies import (
    can_accept_task,
    can_approve_assignment,
    can_comment_task,
    can_request_assignment,
    intended_can_approve_assignment,
    intended_can_request_assignment,
    literal_can_approve_assignment,
    literal_can_request_assignment,
)

ACTOR_ID = 1
SOMEONE_ELSE = 99

ROLE_COMBINATIONS = list(itertools.product([True, False], repeat=3))


def _scenario(is_assignee, is_creator, is_leader):
    actor = SimpleNamespace(user_id=ACTOR_ID)
    task = SimpleNamespace(
        current_user_id=ACTOR_ID if is_assignee else SOMEONE_ELSE,
        created_by_id=ACTOR_ID if is_creator else SOMEONE_ELSE,
    )
    project = SimpleNamespace(team_leader_id=ACTOR_ID if is_leader else SOMEONE_ELSE)
    return actor, task, project


# =============================================================================
# Assignment requests
# =============================================================================

class TestRequestAssignment:

    @pytest.mark.parametrize("is_assignee,is_creator,is_leader", ROLE_COMBINATIONS)
    def test_intended_allows_any_of_the_three_roles(self, is_assignee, is_creator, is_leader):
        allowed, reason = intended_can_request_assignment(*_scenario(is_assignee, is_creator, is_leader))

        assert allowed is (is_assignee or is_creator or is_leader)
        assert reason == ("" if allowed else "You are not allowed to perform this action")

    @pytest.mark.parametrize("is_assignee,is_creator,is_leader", ROLE_COMBINATIONS)
    def test_literal_requires_all_three_roles(self, is_assignee, is_creator, is_leader):
        allowed, _ = literal_can_request_assignment(*_scenario(is_assignee, is_creator, is_leader))

        assert allowed is (is_assignee and is_creator and is_leader)

    def test_mode_selects_rule(self, settings):
        """Creator only: allowed by the intended rule, denied by the literal one."""
        scenario = _scenario(is_assignee=False, is_creator=True, is_leader=False)

        settings.TASK_AUTHZ_MODE = "intended"
        assert can_request_assignment(*scenario)[0] is True

        settings.TASK_AUTHZ_MODE = "literal"
        assert can_request_assignment(*scenario)[0] is False


# =============================================================================
# Assignment approval
# =============================================================================

class TestApproveAssignment:

    @pytest.mark.parametrize("is_creator,is_leader", list(itertools.product([True, False], repeat=2)))
    def test_intended_allows_creator_or_leader(self, is_creator, is_leader):
        allowed, _ = intended_can_approve_assignment(*_scenario(False, is_creator, is_leader))

        assert allowed is (is_creator or is_leader)

    @pytest.mark.parametrize("is_creator,is_leader", list(itertools.product([True, False], repeat=2)))
    def test_literal_requires_creator_and_leader(self, is_creator, is_leader):
        allowed, _ = literal_can_approve_assignment(*_scenario(False, is_creator, is_leader))

        assert allowed is (is_creator and is_leader)

    def test_assignee_alone_cannot_approve(self):
        allowed, _ = can_approve_assignment(*_scenario(is_assignee=True, is_creator=False, is_leader=False))
        assert allowed is False

    def test_mode_selects_rule(self, settings):
        scenario = _scenario(is_assignee=False, is_creator=False, is_leader=True)

        settings.TASK_AUTHZ_MODE = "intended"
        assert can_approve_assignment(*scenario)[0] is True

        settings.TASK_AUTHZ_MODE = "literal"
        assert can_approve_assignment(*scenario)[0] is False

    def test_unknown_mode_is_a_configuration_error(self, settings):
        settings.TASK_AUTHZ_MODE = "lenient"

        with pytest.raises(ImproperlyConfigured):
            can_approve_assignment(*_scenario(True, True, True))


# =============================================================================
# Acceptance and comments
# =============================================================================

class TestAcceptAndComment:

    @pytest.mark.parametrize("is_assignee,is_creator,is_leader", ROLE_COMBINATIONS)
    def test_only_current_assignee_can_accept(self, is_assignee, is_creator, is_leader):
        actor, task, _ = _scenario(is_assignee, is_creator, is_leader)

        assert can_accept_task(actor, task)[0] is is_assignee

    @pytest.mark.parametrize("is_assignee,is_creator,is_leader", ROLE_COMBINATIONS)
    def test_anyone_can_comment(self, is_assignee, is_creator, is_leader):
        actor, task, _ = _scenario(is_assignee, is_creator, is_leader)

        assert can_comment_task(actor, task) == (True, "")
