# tests/conftest.py
"""
Pytest fixtures for TaskHub tests.

The default cast, all in "Acme" unless noted:
- admin_user: admin access level, creates tasks
- leader: team lead, team leader of ``project``
- member / other_member: team members, used as assignees
- outsider: admin of a second company
"""

import pytest
from datetime import date

from django.contrib.auth import get_user_model
from django.core.cache import cache

from accounts.authz import actor_for_user
from accounts.models import Company, UserGroup
from projects.models import Project


User = get_user_model()

PASSWORD = "S3cure-pass-123"


@pytest.fixture(autouse=True)
def _test_settings(settings, tmp_path):
    """Isolated uploads, in-memory mail and the intended authorization rules."""
    settings.MEDIA_ROOT = tmp_path / "media"
    settings.EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"
    settings.TASK_AUTHZ_MODE = "intended"
    # Throttle history lives in the cache.
    cache.clear()
    yield
    cache.clear()


# =============================================================================
# Company, Group & User Fixtures
# =============================================================================

@pytest.fixture
def company(db):
    return Company.objects.create(
        company_id="ACME",
        name="Acme",
        email="office@acme.test",
        phone="+20100000000",
    )


@pytest.fixture
def second_company(db):
    """A second tenant for isolation tests."""
    return Company.objects.create(
        company_id="GLOBEX",
        name="Globex",
        email="office@globex.test",
        phone="+20100000001",
    )


def make_group(company, access_level, name=None, field_schema=None):
    return UserGroup.objects.create(
        company=company,
        name=name or access_level.title(),
        access_level=access_level,
        field_schema=field_schema or [],
    )


def make_user(group, username, verified=True, **extra):
    return User.objects.create_user(
        username=f"{group.company.company_id}-{username}",
        password=PASSWORD,
        email=f"{username}@{group.company.company_id.lower()}.test",
        user_group=group,
        verified=verified,
        **extra,
    )


@pytest.fixture
def admin_group(company):
    return make_group(company, UserGroup.AccessLevel.ADMIN)


@pytest.fixture
def manager_group(company):
    return make_group(company, UserGroup.AccessLevel.MANAGER)


@pytest.fixture
def lead_group(company):
    return make_group(company, UserGroup.AccessLevel.TEAM_LEAD)


@pytest.fixture
def member_group(company):
    return make_group(company, UserGroup.AccessLevel.TEAM_MEMBER)


@pytest.fixture
def admin_user(admin_group):
    return make_user(admin_group, "admin")


@pytest.fixture
def manager(manager_group):
    return make_user(manager_group, "manager")


@pytest.fixture
def leader(lead_group):
    return make_user(lead_group, "leader")


@pytest.fixture
def member(member_group):
    return make_user(member_group, "member")


@pytest.fixture
def other_member(member_group):
    return make_user(member_group, "other")


@pytest.fixture
def outsider(second_company):
    return make_user(make_group(second_company, UserGroup.AccessLevel.ADMIN), "outsider")


# =============================================================================
# Actor Fixtures
# =============================================================================

@pytest.fixture
def admin_actor(admin_user):
    return actor_for_user(admin_user)


@pytest.fixture
def leader_actor(leader):
    return actor_for_user(leader)


@pytest.fixture
def member_actor(member):
    return actor_for_user(member)


@pytest.fixture
def other_actor(other_member):
    return actor_for_user(other_member)


@pytest.fixture
def outsider_actor(outsider):
    return actor_for_user(outsider)


# =============================================================================
# Project & Task Fixtures
# =============================================================================

@pytest.fixture
def project(company, leader):
    return Project.objects.create(
        company=company,
        name="Warehouse fit-out",
        team_leader=leader,
        start_date=date(2024, 1, 1),
        end_date=date(2024, 12, 31),
    )


@pytest.fixture
def task(admin_actor, project, member):
    """Task created by admin_user and assigned to member."""
    from tasks.commands import create_task

    result = create_task(
        admin_actor,
        project_id=project.pk,
        assigned_user_id=member.pk,
        title="Fix bug",
        description="Door sensor reports open when closed",
        start_date=date(2024, 3, 1),
        due_date=date(2024, 3, 15),
    )
    assert result.success, result.error
    return result.data


# =============================================================================
# API Client Fixtures
# =============================================================================

@pytest.fixture
def api_client():
    """Create a DRF API client."""
    from rest_framework.test import APIClient
    return APIClient()


@pytest.fixture
def admin_client(api_client, admin_user):
    api_client.force_authenticate(user=admin_user)
    return api_client


@pytest.fixture
def member_client(api_client, member):
    api_client.force_authenticate(user=member)
    return api_client
