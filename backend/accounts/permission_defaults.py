# accounts/permission_defaults.py
"""
Permission codes granted by each user-group access level.

Reading tasks, projects and users, creating tasks and taking part in the
task workflow only require an authenticated company member; the workflow
has its own relationship-based rules in tasks.policies.
"""

ACCESS_LEVEL_DEFAULTS = {
    "admin": {
        "company.manage_groups",
        "users.register",
        "users.update_any",
        "projects.create",
    },
    "manager": {
        "company.manage_groups",
        "users.register",
        "projects.create",
    },
    "team_lead": {
        "projects.create",
    },
    "team_member": set(),
    "guest": set(),
}


def permissions_for(access_level) -> frozenset:
    return frozenset(ACCESS_LEVEL_DEFAULTS.get(access_level, ()))


def all_permission_codes() -> set[str]:
    codes: set[str] = set()
    for s in ACCESS_LEVEL_DEFAULTS.values():
        codes |= set(s)
    return codes
