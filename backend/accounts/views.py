"""
Thin views that delegate to the commands layer.

Views handle: HTTP parsing, authentication, response formatting.
Commands handle: validation, business rules and persistence.
"""

from django.conf import settings
from django.http import Http404
from django.middleware.csrf import get_token
from django.shortcuts import get_object_or_404
from rest_framework import permissions, status
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.views import APIView

from accounts.authz import resolve_actor
from ops.responses import envelope, result_response
from .commands import (
    create_user_group,
    login,
    logout,
    register_company_and_user,
    register_new_user,
    request_new_otp,
    update_user,
    verify_otp,
)
from .models import User, UserGroup
from .serializers import (
    CompanyRegistrationSerializer,
    CompanySerializer,
    LoginSerializer,
    OTPSerializer,
    UserGroupCreateSerializer,
    UserGroupSerializer,
    UserRegistrationSerializer,
    UserSerializer,
    UserUpdateSerializer,
)
from .throttles import LoginThrottle, OTPThrottle, RegistrationThrottle


def _company_users(actor):
    return User.objects.filter(
        user_group__company=actor.company,
    ).select_related("user_group__company").order_by("username")


def _truthy(value: str) -> bool:
    return str(value).strip().lower() in ("1", "true", "yes")


# =============================================================================
# Companies
# =============================================================================

class RegisterCompanyView(APIView):
    """
    POST /api/companies/register/ -> company + admin group + admin user

    Multipart, since the company logo is uploaded with the form.
    """
    permission_classes = [permissions.AllowAny]
    authentication_classes = []
    throttle_classes = [RegistrationThrottle]
    parser_classes = [MultiPartParser, FormParser]

    def post(self, request):
        serializer = CompanyRegistrationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)

        result = register_company_and_user(
            name=data.pop("name"),
            company_id=data.pop("id"),
            email=data.pop("email"),
            phone=data.pop("phone"),
            username=data.pop("username"),
            password=data.pop("password"),
            logo=data.pop("logo"),
            **data,
        )
        return result_response(
            result,
            "Company registered successfully, Please enter OTP for verification",
            status.HTTP_201_CREATED,
        )


class CompanyDetailView(APIView):
    """GET /api/companies/ -> the actor's company"""
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        actor = resolve_actor(request)
        return envelope(CompanySerializer(actor.company).data, "Company fetched successfully")


# =============================================================================
# User groups
# =============================================================================

class UserGroupListCreateView(APIView):
    """
    GET /api/groups/ -> groups of the actor's company
    POST /api/groups/ -> create a group (admin/manager)
    """
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        actor = resolve_actor(request)
        groups = UserGroup.objects.filter(company=actor.company).select_related("company").order_by("name")
        return envelope(UserGroupSerializer(groups, many=True).data, "User groups fetched successfully")

    def post(self, request):
        actor = resolve_actor(request)

        serializer = UserGroupCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = create_user_group(actor, **serializer.validated_data)
        return result_response(
            result,
            "User group created successfully",
            status.HTTP_201_CREATED,
            serialize=lambda group: UserGroupSerializer(group).data,
        )


# =============================================================================
# Authentication
# =============================================================================

class LoginView(APIView):
    permission_classes = [permissions.AllowAny]
    authentication_classes = []
    throttle_classes = [LoginThrottle]

    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = login(**serializer.validated_data)
        response = result_response(result, "User logged in successfully")
        if result.success:
            cookie_options = {"httponly": True, "secure": not settings.DEBUG, "samesite": "Lax"}
            response.set_cookie(settings.ACCESS_TOKEN_COOKIE, result.data["accessToken"], **cookie_options)
            response.set_cookie(settings.REFRESH_TOKEN_COOKIE, result.data["refreshToken"], **cookie_options)
            # Cookie-authenticated writes must echo this token in X-CSRFToken.
            get_token(request)
        return response


class LogoutView(APIView):
    permission_classes = [permissions.AllowAny]

    def post(self, request):
        refresh_token = request.data.get("refresh") or request.COOKIES.get(settings.REFRESH_TOKEN_COOKIE)
        result = logout(refresh_token)
        response = result_response(result, "User logged out successfully")
        if result.success:
            response.delete_cookie(settings.ACCESS_TOKEN_COOKIE)
            response.delete_cookie(settings.REFRESH_TOKEN_COOKIE)
        return response


class NewOTPView(APIView):
    """GET /api/users/new-otp/ -> issue a fresh code for the current user"""
    permission_classes = [permissions.IsAuthenticated]
    throttle_classes = [OTPThrottle]

    def get(self, request):
        result = request_new_otp(request.user)
        return result_response(result, "OTP sent successfully")


class VerifyOTPView(APIView):
    """POST /api/users/verify-otp/ -> mark the current user verified"""
    permission_classes = [permissions.IsAuthenticated]
    throttle_classes = [OTPThrottle]

    def post(self, request):
        serializer = OTPSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = verify_otp(request.user, serializer.validated_data["otp"])
        return result_response(result, "User verified successfully")


# =============================================================================
# Users
# =============================================================================

class RegisterUserView(APIView):
    """POST /api/users/register/<group_id>/ -> add a user to a group"""
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, group_id):
        actor = resolve_actor(request)

        serializer = UserRegistrationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = register_new_user(
            actor,
            group_id=group_id,
            extra_data=request.data,
            **serializer.validated_data,
        )
        return result_response(
            result,
            "User Added successfully",
            status.HTTP_201_CREATED,
            serialize=lambda user: UserSerializer(user).data,
        )


class MeView(APIView):
    """GET /api/users/ -> the current user"""
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        user = User.objects.select_related("user_group__company").get(pk=request.user.pk)
        return envelope(UserSerializer(user).data, "User fetched successfully")


class UserListView(APIView):
    """GET /api/users/all/?group=&verified= -> users of the actor's company"""
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        actor = resolve_actor(request)
        users = _company_users(actor)

        group = request.query_params.get("group")
        if group and group.isdigit():
            users = users.filter(user_group_id=group)
        verified = request.query_params.get("verified")
        if verified is not None:
            users = users.filter(verified=_truthy(verified))

        return envelope(UserSerializer(users, many=True).data, "Users retrieved successfully")


class UserGroupMembersView(APIView):
    """GET /api/users/all/<group_id>/ -> users of one group"""
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, group_id):
        actor = resolve_actor(request)
        group = get_object_or_404(UserGroup, pk=group_id, company=actor.company)
        users = _company_users(actor).filter(user_group=group)
        return envelope(UserSerializer(users, many=True).data, "Users retrieved successfully")


class UserDetailView(APIView):
    """GET /api/users/<username>/"""
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, username):
        actor = resolve_actor(request)
        user = _company_users(actor).filter(username=username).first()
        if user is None:
            raise Http404("User not found")
        return envelope(UserSerializer(user).data, "User fetched successfully")


class UserUpdateView(APIView):
    """PUT /api/users/<username>/update/ -> email, extras, profile image"""
    permission_classes = [permissions.IsAuthenticated]
    parser_classes = [MultiPartParser, FormParser, JSONParser]

    def put(self, request, username):
        actor = resolve_actor(request)

        serializer = UserUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = update_user(
            actor,
            username,
            email=data.get("email"),
            extras=data.get("extras"),
            profile_image=data.get("profileImage"),
        )
        return result_response(
            result,
            "User updated successfully",
            serialize=lambda user: UserSerializer(user).data,
        )
