# tests/test_accounts.py
"""
Tests for the accounts module.

Tests cover:
- Company registration (command and API)
- OTP issue, reissue and verification
- User groups and extra-field schemas
- User registration, update and lookup
- Login / logout with JWT cookies
"""

import pytest
from datetime import timedelta

from django.contrib.auth import get_user_model
from django.core import mail
from django.core.exceptions import PermissionDenied
from django.core.files.uploadedfile import SimpleUploadedFile
from django.utils import timezone
from rest_framework.test import APIClient

from accounts.authz import actor_for_user
from accounts.commands import (
    create_user_group,
    issue_otp,
    login,
    logout,
    register_company_and_user,
    register_new_user,
    request_new_otp,
    update_user,
    verify_otp,
)
from accounts.models import Company, OTP, UserGroup
from ops.results import ErrorKind

from conftest import PASSWORD, make_group, make_user


User = get_user_model()


def _logo():
    return SimpleUploadedFile("logo.png", b"png-bytes", content_type="image/png")


def _register(**overrides):
    fields = dict(
        name="Initech",
        company_id="init",
        email="hello@initech.test",
        phone="+201234",
        username="bill",
        password=PASSWORD,
        logo=_logo(),
    )
    fields.update(overrides)
    return register_company_and_user(**fields)


# =============================================================================
# Company registration
# =============================================================================

@pytest.mark.django_db
class TestRegisterCompany:

    def test_creates_company_admin_group_and_user(self):
        result = _register(address=" 1 Main St ", colorCode={"primary": "#111", "secondary": "#eee"}, type="Retail")

        assert result.success
        assert result.data["username"] == "INIT-bill"

        company = Company.objects.get(company_id="INIT")
        assert company.logo.startswith("/uploads/")
        assert company.address == "1 Main St"
        assert company.primary_color == "#111"
        assert company.secondary_color == "#eee"
        assert company.company_type == "Retail"
        assert company.website == ""

        user = User.objects.get(pk=result.data["userId"])
        assert user.user_group.name == "Admin"
        assert user.user_group.access_level == UserGroup.AccessLevel.ADMIN
        assert user.user_group.field_schema == []
        assert user.verified is False
        assert user.check_password(PASSWORD)

    def test_mails_an_otp(self):
        result = _register()

        otp = OTP.objects.get(user_id=result.data["userId"])
        assert len(mail.outbox) == 1
        assert mail.outbox[0].to == ["hello@initech.test"]
        assert otp.code in mail.outbox[0].body
        assert "Initech" in mail.outbox[0].body

    @pytest.mark.parametrize("field", ["name", "company_id", "email", "phone"])
    def test_company_fields_required(self, field):
        result = _register(**{field: "  "})

        assert result.kind == ErrorKind.INVALID_INPUT
        assert result.error == "Please fill all required fields for Company"

    def test_logo_required(self):
        result = _register(logo=None)

        assert result.error == "Please upload a logo for the Company"

    def test_duplicate_company(self, company):
        assert _register(name="acme").kind == ErrorKind.INVALID_INPUT
        assert _register(company_id="acme").error == "Company already exists with the same name or id"

    def test_weak_password(self):
        result = _register(password="short")

        assert result.kind == ErrorKind.INVALID_INPUT
        assert not Company.objects.exists()

    def test_api(self, api_client):
        r = api_client.post(
            "/api/companies/register/",
            {
                "name": "Initech",
                "id": "init",
                "email": "hello@initech.test",
                "phone": "+201234",
                "username": "bill",
                "password": PASSWORD,
                "logo": _logo(),
            },
            format="multipart",
        )

        assert r.status_code == 201
        assert r.json()["data"]["username"] == "INIT-bill"
        assert r.json()["message"] == "Company registered successfully, Please enter OTP for verification"

    def test_api_rejects_non_alphanumeric_id(self, api_client):
        r = api_client.post(
            "/api/companies/register/",
            {
                "name": "Initech", "id": "in-it", "email": "hello@initech.test",
                "phone": "1", "username": "bill", "password": PASSWORD, "logo": _logo(),
            },
            format="multipart",
        )

        assert r.status_code == 400
        assert "id" in r.json()["errors"]


# =============================================================================
# OTP
# =============================================================================

@pytest.mark.django_db
class TestOtp:

    def test_issue_replaces_existing_code(self, member):
        first = issue_otp(member)
        second = issue_otp(member)

        assert first.pk == second.pk
        assert OTP.objects.filter(user=member).count() == 1

    def test_verify_marks_user_and_deletes_codes(self, member_group):
        user = make_user(member_group, "fresh", verified=False)
        otp = issue_otp(user)

        result = verify_otp(user, otp.code)

        assert result.success
        user.refresh_from_db()
        assert user.verified is True
        assert not OTP.objects.filter(user=user).exists()

    @pytest.mark.parametrize("code", ["", "12345", "abcdef", "1234567"])
    def test_malformed_code(self, member, code):
        result = verify_otp(member, code)

        assert result.error == "Please provide a valid 6 digit OTP"

    def test_wrong_code(self, member_group):
        user = make_user(member_group, "fresh", verified=False)
        otp = issue_otp(user)
        wrong = "000000" if otp.code != "000000" else "111111"

        assert verify_otp(user, wrong).error == "Invalid OTP"

    def test_expired_code(self, settings, member_group):
        user = make_user(member_group, "fresh", verified=False)
        otp = issue_otp(user)
        OTP.objects.filter(pk=otp.pk).update(
            created_at=timezone.now() - timedelta(minutes=settings.OTP_EXPIRY_MINUTES + 1)
        )

        result = verify_otp(user, otp.code)

        assert result.kind == ErrorKind.INVALID_INPUT
        user.refresh_from_db()
        assert user.verified is False

    def test_new_otp_for_verified_user_is_rejected(self, member):
        assert request_new_otp(member).error == "User already verified"

    def test_new_otp_api(self, api_client, member_group):
        user = make_user(member_group, "fresh", verified=False)
        api_client.force_authenticate(user=user)

        r = api_client.get("/api/users/new-otp/")

        assert r.status_code == 200
        assert len(mail.outbox) == 1

        otp = OTP.objects.get(user=user)
        r = api_client.post("/api/users/verify-otp/", {"otp": otp.code}, format="json")
        assert r.status_code == 200
        assert r.json()["message"] == "User verified successfully"


# =============================================================================
# User groups
# =============================================================================

@pytest.mark.django_db
class TestUserGroups:

    def test_admin_creates_group_with_schema(self, admin_actor):
        result = create_user_group(
            admin_actor,
            name="Installers",
            access_level="team_member",
            field_schema=[{"name": "badge", "type": "Number", "required": True, "unique": True}],
        )

        assert result.success
        assert result.data.field_schema == [
            {"name": "badge", "type": "Number", "required": True, "unique": True, "default": []},
        ]

    def test_invalid_schema(self, admin_actor):
        result = create_user_group(
            admin_actor, name="Broken", access_level="guest", field_schema=[{"name": "x", "type": "Color"}],
        )

        assert result.kind == ErrorKind.INVALID_INPUT

    def test_manager_cannot_create_admin_group(self, manager):
        result = create_user_group(actor_for_user(manager), name="Root", access_level="admin")

        assert result.kind == ErrorKind.FORBIDDEN

    def test_member_cannot_manage_groups(self, member_actor):
        with pytest.raises(PermissionDenied):
            create_user_group(member_actor, name="Mine", access_level="guest")

    def test_duplicate_name(self, admin_actor, member_group):
        result = create_user_group(admin_actor, name=member_group.name.upper(), access_level="guest")

        assert result.kind == ErrorKind.INVALID_INPUT

    def test_api_lists_only_own_company(self, admin_client, admin_group, member_group, outsider):
        r = admin_client.get("/api/groups/")

        assert r.status_code == 200
        assert {g["id"] for g in r.json()["data"]} == {admin_group.pk, member_group.pk}


# =============================================================================
# Users
# =============================================================================

@pytest.fixture
def badge_group(company):
    return make_group(
        company,
        UserGroup.AccessLevel.TEAM_MEMBER,
        name="Installers",
        field_schema=[
            {"name": "badge", "type": "Number", "required": True, "unique": True, "default": []},
            {"name": "shift", "type": "String", "required": False, "unique": False, "default": ["day"]},
        ],
    )


@pytest.mark.django_db
class TestRegisterUser:

    def test_admin_adds_user_with_extras(self, admin_actor, badge_group):
        result = register_new_user(
            admin_actor, badge_group.pk, "dana", "dana@acme.test", PASSWORD, extra_data={"badge": "17"},
        )

        assert result.success
        user = result.data
        assert user.username == "ACME-dana"
        assert user.extras == {"badge": 17, "shift": "day"}
        assert user.verified is False
        assert OTP.objects.filter(user=user).exists()
        assert len(mail.outbox) == 1

    def test_manager_may_register(self, manager, badge_group):
        result = register_new_user(
            actor_for_user(manager), badge_group.pk, "dana", "dana@acme.test", PASSWORD, {"badge": 1},
        )

        assert result.success

    def test_team_lead_is_forbidden(self, leader_actor, badge_group):
        result = register_new_user(leader_actor, badge_group.pk, "dana", "dana@acme.test", PASSWORD, {"badge": 1})

        assert result.kind == ErrorKind.FORBIDDEN
        assert result.error == "Only admin or manager can add new users"

    def test_required_extra(self, admin_actor, badge_group):
        result = register_new_user(admin_actor, badge_group.pk, "dana", "dana@acme.test", PASSWORD, {})

        assert result.error == "badge: This field is required."

    def test_unique_extra(self, admin_actor, badge_group):
        register_new_user(admin_actor, badge_group.pk, "dana", "dana@acme.test", PASSWORD, {"badge": 5})

        result = register_new_user(admin_actor, badge_group.pk, "eli", "eli@acme.test", PASSWORD, {"badge": "5"})

        assert result.error == "badge: This value is already in use."

    def test_unique_extra_named_like_a_lookup(self, admin_actor, company):
        group = make_group(
            company, UserGroup.AccessLevel.TEAM_MEMBER, name="Fitters",
            field_schema=[{"name": "contains", "type": "String", "unique": True}],
        )

        first = register_new_user(admin_actor, group.pk, "dana", "dana@acme.test", PASSWORD, {"contains": "A1"})
        second = register_new_user(admin_actor, group.pk, "eli", "eli@acme.test", PASSWORD, {"contains": "A1"})

        assert first.success
        assert first.data.extras == {"contains": "A1"}
        assert second.error == "contains: This value is already in use."

    def test_group_of_another_company(self, outsider_actor, badge_group):
        result = register_new_user(outsider_actor, badge_group.pk, "dana", "d@x.test", PASSWORD, {"badge": 1})

        assert result.kind == ErrorKind.NOT_FOUND

    def test_duplicate_username(self, admin_actor, member_group, member):
        result = register_new_user(admin_actor, member_group.pk, "member", "m2@acme.test", PASSWORD)

        assert result.error == "User already exists with the same username"

    def test_api(self, admin_client, badge_group):
        r = admin_client.post(
            f"/api/users/register/{badge_group.pk}/",
            {"username": "dana", "email": "dana@acme.test", "password": PASSWORD, "badge": 9},
            format="json",
        )

        assert r.status_code == 201
        assert r.json()["data"]["extras"] == {"badge": 9, "shift": "day"}
        assert "password" not in r.json()["data"]


@pytest.mark.django_db
class TestUpdateUser:

    def test_user_updates_self(self, member_actor, member):
        result = update_user(member_actor, member.username, email="new@acme.test")

        assert result.success
        member.refresh_from_db()
        assert member.email == "new@acme.test"

    def test_admin_updates_anyone(self, admin_actor, member):
        image = SimpleUploadedFile("me.jpg", b"jpg", content_type="image/jpeg")

        result = update_user(admin_actor, member.username, profile_image=image)

        assert result.data.profile_image.startswith("/uploads/")

    def test_member_cannot_update_others(self, member_actor, other_member):
        result = update_user(member_actor, other_member.username, email="x@acme.test")

        assert result.kind == ErrorKind.FORBIDDEN

    def test_user_of_another_company_is_not_found(self, outsider_actor, member):
        assert update_user(outsider_actor, member.username, email="x@x.test").kind == ErrorKind.NOT_FOUND


@pytest.mark.django_db
class TestUserReads:

    def test_me(self, member_client, member):
        r = member_client.get("/api/users/")

        assert r.status_code == 200
        assert r.json()["data"]["username"] == member.username
        assert r.json()["data"]["user_group"]["company"]["company_id"] == "ACME"

    def test_list_filters(self, admin_client, admin_user, member, member_group, outsider):
        r = admin_client.get("/api/users/all/", {"group": member_group.pk})
        assert [u["id"] for u in r.json()["data"]] == [member.pk]

        r = admin_client.get("/api/users/all/")
        assert outsider.pk not in {u["id"] for u in r.json()["data"]}

    def test_detail_of_other_company_is_404(self, admin_client, outsider):
        r = admin_client.get(f"/api/users/{outsider.username}/")

        assert r.status_code == 404


# =============================================================================
# Sessions
# =============================================================================

@pytest.mark.django_db
class TestLogin:

    def test_login_returns_token_pair(self, member):
        result = login(member.username, PASSWORD)

        assert result.success
        assert result.data["username"] == member.username
        assert result.data["accessToken"]
        assert result.data["refreshToken"]

    def test_unknown_user(self, db):
        assert login("ACME-ghost", PASSWORD).error == "User not found"

    def test_wrong_password(self, member):
        result = login(member.username, "wrong-password")

        assert result.kind == ErrorKind.INVALID_INPUT
        assert result.error == "Invalid credentials"

    def test_login_sets_cookies_used_for_auth(self, api_client, member):
        r = api_client.post("/api/users/login/", {"username": member.username, "password": PASSWORD}, format="json")

        assert r.status_code == 200
        assert r.cookies["accessToken"]["httponly"]
        assert r.cookies["refreshToken"].value == r.json()["data"]["refreshToken"]

        # APIClient keeps the cookies for the next request.
        r = api_client.get("/api/users/")
        assert r.status_code == 200
        assert r.json()["data"]["id"] == member.pk

    def test_bearer_header(self, api_client, member):
        token = login(member.username, PASSWORD).data["accessToken"]
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")

        assert api_client.get("/api/users/").status_code == 200

    def test_invalid_token_is_401(self, api_client, db):
        api_client.credentials(HTTP_AUTHORIZATION="Bearer not-a-token")

        r = api_client.get("/api/users/")

        assert r.status_code == 401
        assert r.json()["code"] == "unauthorized"

    def test_logout_blacklists_refresh_token(self, member):
        refresh = login(member.username, PASSWORD).data["refreshToken"]

        assert logout(refresh).success
        assert logout(refresh).error == "Invalid token"

    def test_logout_requires_token(self):
        assert logout("").kind == ErrorKind.INVALID_INPUT

    def test_cookie_writes_need_csrf_token(self, member, task):
        client = APIClient(enforce_csrf_checks=True)
        r = client.post("/api/users/login/", {"username": member.username, "password": PASSWORD}, format="json")
        csrf_token = r.cookies["csrftoken"].value

        r = client.post(f"/api/tasks/{task.pk}/accept/")
        assert r.status_code == 403
        assert r.json()["message"].startswith("CSRF Failed")

        r = client.post(f"/api/tasks/{task.pk}/accept/", HTTP_X_CSRFTOKEN=csrf_token)
        assert r.status_code == 200

    def test_bearer_writes_skip_csrf(self, member, task):
        client = APIClient(enforce_csrf_checks=True)
        token = login(member.username, PASSWORD).data["accessToken"]
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")

        assert client.post(f"/api/tasks/{task.pk}/accept/").status_code == 200
