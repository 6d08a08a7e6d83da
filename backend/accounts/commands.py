# accounts/commands.py
"""
Command layer for accounts operations.

Every mutation of companies, groups, users and OTPs goes through these
functions. Commands validate input, apply the change inside a transaction
and return a CommandResult; views only translate HTTP to arguments and
results to envelopes.
"""

import logging
import secrets
from datetime import timedelta

from django.conf import settings
from django.contrib.auth import authenticate
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken

from accounts.authz import ActorContext, require
from accounts.email_service import send_otp_email
from accounts.models import Company, OTP, User, UserGroup
from accounts.schema import SchemaError, clean_extras, parse_schema
from ops.patching import apply_patch, set_attr, strip
from ops.results import CommandResult
from ops.uploads import save_upload

logger = logging.getLogger(__name__)


def scoped_username(company: Company, username: str) -> str:
    """Usernames are unique per company: "{COMPANYID}-{username}"."""
    return f"{company.company_id.upper()}-{username.strip()}"


def _generate_otp_code() -> str:
    return str(100000 + secrets.randbelow(900000))


def _password_errors(password: str, user=None) -> str:
    try:
        validate_password(password, user=user)
    except ValidationError as e:
        return " ".join(e.messages)
    return ""


def _set_color_code(company: Company, value) -> None:
    if isinstance(value, dict):
        company.primary_color = str(value.get("primary", "")).strip()
        company.secondary_color = str(value.get("secondary", "")).strip()
    else:
        company.primary_color = str(value).strip()


# Optional company fields accepted at registration: input key -> setter
COMPANY_OPTIONAL_FIELDS = {
    "address": set_attr("address", strip),
    "colorCode": _set_color_code,
    "website": set_attr("website", strip),
    "established": set_attr("established", strip),
    "type": set_attr("company_type", strip),
    "size": set_attr("size", strip),
    "country": set_attr("country", strip),
}


# =============================================================================
# OTP
# =============================================================================

def issue_otp(user: User, company_name: str = "") -> OTP:
    """
    Create or refresh the user's OTP and mail it.

    A user has at most one live code; requesting a new one replaces it.
    """
    code = _generate_otp_code()
    otp = OTP.objects.filter(user=user).order_by("-created_at").first()
    if otp is None:
        otp = OTP.objects.create(user=user, code=code)
    else:
        otp.code = code
        otp.created_at = timezone.now()
        otp.save(update_fields=["code", "created_at"])

    send_otp_email(user, code, company_name=company_name)
    return otp


@transaction.atomic
def request_new_otp(user: User) -> CommandResult:
    if user.verified:
        return CommandResult.invalid("User already verified")

    issue_otp(user)
    return CommandResult.ok({"username": user.username})


@transaction.atomic
def verify_otp(user: User, code) -> CommandResult:
    """
    Mark the user verified if the code matches a live OTP.

    All of the user's OTPs are deleted on success.
    """
    code = str(code or "").strip()
    if len(code) != 6 or not code.isdigit():
        return CommandResult.invalid("Please provide a valid 6 digit OTP")

    cutoff = timezone.now() - timedelta(minutes=settings.OTP_EXPIRY_MINUTES)
    if not OTP.objects.filter(user=user, code=code, created_at__gte=cutoff).exists():
        return CommandResult.invalid("Invalid OTP")

    user.verified = True
    user.save(update_fields=["verified"])
    OTP.objects.filter(user=user).delete()

    logger.info("User verified", extra={"user_id": user.pk})
    return CommandResult.ok({"username": user.username})


# =============================================================================
# Registration (Company + Admin group + User atomic creation)
# =============================================================================

@transaction.atomic
def register_company_and_user(
    name: str,
    company_id: str,
    email: str,
    phone: str,
    username: str,
    password: str,
    logo=None,
    **optional,
) -> CommandResult:
    """
    Register a new company together with its first administrator.

    This atomically:
    1. Creates the company (optional fields applied from COMPANY_OPTIONAL_FIELDS)
    2. Creates the "Admin" user group with access level admin
    3. Creates the admin user "{COMPANYID}-{username}"
    4. Issues and mails an OTP for verification

    Returns:
        CommandResult with {"userId", "username"}
    """
    name = (name or "").strip()
    company_id = (company_id or "").strip().upper()
    email = (email or "").strip()
    phone = (phone or "").strip()

    if not name or not company_id or not email or not phone:
        return CommandResult.invalid("Please fill all required fields for Company")

    if not (username or "").strip() or not password:
        return CommandResult.invalid("Please fill all required fields for User")

    if logo is None:
        return CommandResult.invalid("Please upload a logo for the Company")

    if Company.objects.filter(name__iexact=name).exists() or \
            Company.objects.filter(company_id__iexact=company_id).exists():
        return CommandResult.invalid("Company already exists with the same name or id")

    full_username = f"{company_id}-{username.strip()}"
    if User.objects.filter(username=full_username).exists():
        return CommandResult.invalid("User already exists with the same username")

    password_error = _password_errors(password)
    if password_error:
        return CommandResult.invalid(password_error)

    company = Company(
        name=name,
        company_id=company_id,
        email=email,
        phone=phone,
        logo=save_upload(logo),
    )
    apply_patch(company, COMPANY_OPTIONAL_FIELDS, optional)
    company.save()

    group = UserGroup.objects.create(
        company=company,
        name="Admin",
        description="Admin of the Company",
        access_level=UserGroup.AccessLevel.ADMIN,
        field_schema=[],
    )

    user = User.objects.create_user(
        username=full_username,
        password=password,
        email=email,
        user_group=group,
    )

    issue_otp(user, company_name=company.name)

    logger.info(
        "Company registered",
        extra={"company_id": company.company_id, "user_id": user.pk},
    )
    return CommandResult.ok({"userId": user.pk, "username": user.username})


# =============================================================================
# User groups
# =============================================================================

@transaction.atomic
def create_user_group(
    actor: ActorContext,
    name: str,
    access_level: str,
    description: str = "",
    field_schema=None,
) -> CommandResult:
    require(actor, "company.manage_groups")

    name = (name or "").strip()
    if not name:
        return CommandResult.invalid("Group name is required")

    if access_level not in UserGroup.AccessLevel.values:
        return CommandResult.invalid(
            f"Access level must be one of {', '.join(UserGroup.AccessLevel.values)}"
        )

    # Only admins may create admin groups
    if access_level == UserGroup.AccessLevel.ADMIN and not actor.is_admin:
        return CommandResult.forbidden("Only admins can create admin groups")

    try:
        specs = parse_schema(field_schema)
    except SchemaError as e:
        return CommandResult.invalid(str(e))

    if UserGroup.objects.filter(company=actor.company, name__iexact=name).exists():
        return CommandResult.invalid(f"Group '{name}' already exists")

    group = UserGroup.objects.create(
        company=actor.company,
        name=name,
        description=(description or "").strip(),
        access_level=access_level,
        field_schema=[s.to_dict() for s in specs],
    )
    return CommandResult.ok(group)


# =============================================================================
# Users
# =============================================================================

def _extras_taken(group: UserGroup, exclude_user_id=None):
    def taken(spec, value) -> bool:
        # The trailing __exact keeps names such as "contains" a key lookup.
        qs = User.objects.filter(user_group=group, **{f"extras__{spec.name}__exact": value})
        if exclude_user_id is not None:
            qs = qs.exclude(pk=exclude_user_id)
        return qs.exists()
    return taken


@transaction.atomic
def register_new_user(
    actor: ActorContext,
    group_id,
    username: str,
    email: str,
    password: str,
    extra_data=None,
) -> CommandResult:
    """
    Add a user to one of the actor's company groups.

    Only admins and managers may register users. Extra fields are validated
    against the target group's field schema.
    """
    if not group_id:
        return CommandResult.invalid("Please provide user group")

    if not (username or "").strip() or not (email or "").strip() or not password:
        return CommandResult.invalid("Please fill all default fields for User")

    if not actor.has("users.register"):
        return CommandResult.forbidden("Only admin or manager can add new users")

    group = UserGroup.objects.filter(pk=group_id, company=actor.company).first()
    if group is None:
        return CommandResult.not_found("User group not found")

    full_username = scoped_username(actor.company, username)
    if User.objects.filter(username=full_username).exists():
        return CommandResult.invalid("User already exists with the same username")

    password_error = _password_errors(password)
    if password_error:
        return CommandResult.invalid(password_error)

    specs = parse_schema(group.field_schema)
    extras, errors = clean_extras(specs, extra_data or {}, taken=_extras_taken(group))
    if errors:
        field, message = next(iter(errors.items()))
        return CommandResult.invalid(f"{field}: {message}")

    user = User.objects.create_user(
        username=full_username,
        password=password,
        email=email.strip(),
        user_group=group,
        extras=extras,
    )
    issue_otp(user)

    logger.info(
        "User registered",
        extra={"user_id": user.pk, "group_id": group.pk, "registered_by": actor.user_id},
    )
    return CommandResult.ok(user)


@transaction.atomic
def update_user(actor: ActorContext, username: str, email=None, extras=None, profile_image=None) -> CommandResult:
    """
    Update a user's email, extra fields or profile image.

    Users may update themselves; admins may update anyone in their company.
    """
    user = User.objects.select_related("user_group").filter(
        username=username,
        user_group__company=actor.company,
    ).first()
    if user is None:
        return CommandResult.not_found("User not found")

    if user.pk != actor.user_id and not actor.has("users.update_any"):
        return CommandResult.forbidden()

    update_fields = []

    if email not in (None, ""):
        user.email = email.strip()
        update_fields.append("email")

    if extras:
        specs = parse_schema(user.user_group.field_schema)
        merged = {**user.extras, **extras}
        cleaned, errors = clean_extras(
            specs, merged, taken=_extras_taken(user.user_group, exclude_user_id=user.pk)
        )
        if errors:
            field, message = next(iter(errors.items()))
            return CommandResult.invalid(f"{field}: {message}")
        user.extras = cleaned
        update_fields.append("extras")

    if profile_image is not None:
        user.profile_image = save_upload(profile_image)
        update_fields.append("profile_image")

    if update_fields:
        user.save(update_fields=update_fields)

    return CommandResult.ok(user)


# =============================================================================
# Sessions
# =============================================================================

def login(username: str, password: str) -> CommandResult:
    """
    Exchange username and password for a JWT pair.

    Returns:
        CommandResult with {"username", "accessToken", "refreshToken"}
    """
    if not username or not password:
        return CommandResult.invalid("Please provide username and password")

    if not User.objects.filter(username=username).exists():
        return CommandResult.invalid("User not found")

    user = authenticate(username=username, password=password)
    if user is None:
        return CommandResult.invalid("Invalid credentials")

    refresh = RefreshToken.for_user(user)
    user.last_login = timezone.now()
    user.save(update_fields=["last_login"])

    return CommandResult.ok({
        "username": user.username,
        "accessToken": str(refresh.access_token),
        "refreshToken": str(refresh),
    })


def logout(refresh_token: str) -> CommandResult:
    """Blacklist the refresh token so it can no longer mint access tokens."""
    if not refresh_token:
        return CommandResult.invalid("Refresh token required")
    try:
        RefreshToken(refresh_token).blacklist()
    except TokenError:
        return CommandResult.invalid("Invalid token")
    return CommandResult.ok({})
