# tests/test_projects.py
"""
Tests for projects and fabricators.
"""

import pytest
from datetime import date

from django.core.exceptions import PermissionDenied

from ops.results import ErrorKind
from projects.commands import create_fabricator, create_project
from projects.models import Fabricator, Project


@pytest.mark.django_db
class TestCreateProject:

    def test_admin_creates_project(self, admin_actor, company, leader):
        result = create_project(
            admin_actor,
            name=" Lobby refresh ",
            team_leader_id=leader.pk,
            start_date=date(2024, 2, 1),
            end_date=date(2024, 4, 1),
        )

        assert result.success
        assert result.data.name == "Lobby refresh"
        assert result.data.company == company
        assert result.data.team_leader == leader

    def test_team_lead_may_create(self, leader_actor, leader):
        assert create_project(leader_actor, name="Own project", team_leader_id=leader.pk).success

    def test_member_cannot_create(self, member_actor, leader):
        with pytest.raises(PermissionDenied):
            create_project(member_actor, name="Nope", team_leader_id=leader.pk)

    def test_team_leader_must_be_in_company(self, admin_actor, outsider):
        result = create_project(admin_actor, name="Cross", team_leader_id=outsider.pk)

        assert result.kind == ErrorKind.NOT_FOUND
        assert not Project.objects.exists()

    def test_dates_must_be_ordered(self, admin_actor, leader):
        result = create_project(
            admin_actor, name="Backwards", team_leader_id=leader.pk,
            start_date=date(2024, 5, 1), end_date=date(2024, 4, 1),
        )

        assert result.kind == ErrorKind.INVALID_INPUT

    def test_with_fabricator(self, admin_actor, leader):
        fabricator = create_fabricator(admin_actor, name="Steelworks", contact_email="sales@steel.test").data

        result = create_project(admin_actor, name="Frame", team_leader_id=leader.pk, fabricator_id=fabricator.pk)

        assert result.data.fabricator == fabricator


@pytest.mark.django_db
class TestFabricators:

    def test_duplicate_name_in_company(self, admin_actor):
        create_fabricator(admin_actor, name="Steelworks")

        result = create_fabricator(admin_actor, name="steelworks")

        assert result.kind == ErrorKind.INVALID_INPUT
        assert Fabricator.objects.count() == 1

    def test_same_name_in_other_company(self, admin_actor, outsider_actor):
        create_fabricator(admin_actor, name="Steelworks")

        assert create_fabricator(outsider_actor, name="Steelworks").success


@pytest.mark.django_db
class TestProjectApi:

    def test_create_and_list(self, admin_client, leader):
        r = admin_client.post(
            "/api/projects/",
            {"name": "Atrium", "teamLeader": leader.pk, "startDate": "2024-01-01"},
            format="json",
        )

        assert r.status_code == 201
        assert r.json()["data"]["team_leader"]["id"] == leader.pk

        r = admin_client.get("/api/projects/")
        assert [p["name"] for p in r.json()["data"]] == ["Atrium"]

    def test_member_gets_403(self, member_client, leader):
        r = member_client.post("/api/projects/", {"name": "X", "teamLeader": leader.pk}, format="json")

        assert r.status_code == 403
        assert r.json()["code"] == "forbidden"

    def test_detail_is_company_scoped(self, api_client, outsider, project):
        api_client.force_authenticate(user=outsider)

        r = api_client.get(f"/api/projects/{project.pk}/")

        assert r.status_code == 404

    def test_fabricator_api(self, admin_client):
        r = admin_client.post("/api/projects/fabricators/", {"name": "Glassco"}, format="json")

        assert r.status_code == 201
        r = admin_client.get("/api/projects/fabricators/")
        assert [f["name"] for f in r.json()["data"]] == ["Glassco"]
