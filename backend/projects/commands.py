# projects/commands.py
"""Command layer for projects and fabricators."""

import logging

from django.db import transaction

from accounts.authz import ActorContext, require
from accounts.models import User
from ops.results import CommandResult
from .models import Fabricator, Project

logger = logging.getLogger(__name__)


@transaction.atomic
def create_project(
    actor: ActorContext,
    name: str,
    team_leader_id: int,
    description: str = "",
    fabricator_id: int = None,
    start_date=None,
    end_date=None,
) -> CommandResult:
    """
    Create a project in the actor's company.

    The team leader must belong to the same company.
    """
    require(actor, "projects.create")

    name = (name or "").strip()
    if not name:
        return CommandResult.invalid("Project name is required")

    if start_date and end_date and end_date < start_date:
        return CommandResult.invalid("End date cannot be before start date")

    team_leader = User.objects.filter(pk=team_leader_id, user_group__company=actor.company).first()
    if team_leader is None:
        return CommandResult.not_found("Team leader not found")

    fabricator = None
    if fabricator_id:
        fabricator = Fabricator.objects.filter(pk=fabricator_id, company=actor.company).first()
        if fabricator is None:
            return CommandResult.not_found("Fabricator not found")

    project = Project.objects.create(
        company=actor.company,
        name=name,
        description=(description or "").strip(),
        team_leader=team_leader,
        fabricator=fabricator,
        start_date=start_date,
        end_date=end_date,
    )
    logger.info(
        "Project created",
        extra={"project_id": project.pk, "team_leader_id": team_leader.pk, "actor_id": actor.user_id},
    )
    return CommandResult.ok(project)


@transaction.atomic
def create_fabricator(actor: ActorContext, name: str, contact_email: str = "", phone: str = "", address: str = "") -> CommandResult:
    require(actor, "projects.create")

    name = (name or "").strip()
    if not name:
        return CommandResult.invalid("Fabricator name is required")

    if Fabricator.objects.filter(company=actor.company, name__iexact=name).exists():
        return CommandResult.invalid(f"Fabricator '{name}' already exists")

    fabricator = Fabricator.objects.create(
        company=actor.company,
        name=name,
        contact_email=(contact_email or "").strip(),
        phone=(phone or "").strip(),
        address=(address or "").strip(),
    )
    return CommandResult.ok(fabricator)
