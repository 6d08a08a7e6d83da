# accounts/authz.py
"""
Authorization utilities.

Provides:
- ActorContext: Immutable context for the current request
- resolve_actor: Extract actor context from request
- require: Check permissions and raise if not granted

Permissions come from the access level of the actor's user group
(see accounts.permission_defaults). Task workflow rules that depend on the
actor's relationship to a task live in tasks.policies instead.
"""

from dataclasses import dataclass
from typing import FrozenSet
from django.core.exceptions import PermissionDenied
from rest_framework.exceptions import NotAuthenticated

from accounts.models import Company, User, UserGroup
from accounts.permission_defaults import permissions_for


@dataclass(frozen=True)
class ActorContext:
    """
    Immutable context for the current actor (user + company).

    Attributes:
        user: The authenticated user
        company: The user's company (tenant)
        group: The user's group
        perms: Permission codes granted by the group's access level
    """
    user: User
    company: Company
    group: UserGroup
    perms: FrozenSet[str]

    def has(self, code: str) -> bool:
        return code in self.perms

    @property
    def user_id(self) -> int:
        return self.user.pk

    @property
    def access_level(self) -> str:
        return self.group.access_level

    @property
    def is_admin(self) -> bool:
        return self.group.access_level == UserGroup.AccessLevel.ADMIN


def actor_for_user(user: User) -> ActorContext:
    """
    Build an ActorContext for a user.

    Raises:
        PermissionDenied: If the user does not belong to a company group
    """
    if not user.user_group_id:
        raise PermissionDenied("User is not a member of any company.")

    group = UserGroup.objects.select_related("company").get(pk=user.user_group_id)
    return ActorContext(
        user=user,
        company=group.company,
        group=group,
        perms=permissions_for(group.access_level),
    )


def resolve_actor(request) -> ActorContext:
    """
    Extract ActorContext from the current request.

    The group is loaded fresh on every request so access level changes
    take effect immediately.

    Raises:
        NotAuthenticated: If user is not authenticated
        PermissionDenied: If the user has no company group
    """
    user = getattr(request, "user", None)

    if not user or not user.is_authenticated:
        raise NotAuthenticated("Unauthorized")

    return actor_for_user(user)


def require(actor: ActorContext, code: str) -> None:
    """
    Require that the actor has a specific permission.

    Raises:
        PermissionDenied: If permission is not granted

    Example:
        require(actor, "users.register")
    """
    if not actor.has(code):
        raise PermissionDenied(f"Permission denied: {code}")


def check_permission(actor: ActorContext, code: str) -> bool:
    """Check if actor has a permission without raising."""
    return actor.has(code)
