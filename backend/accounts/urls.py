# accounts/urls.py
"""
URL configuration for accounts/auth API.

Endpoints:
- /companies/ - Company registration and info
- /groups/ - User groups of the actor's company
- /users/ - Authentication, OTP verification and user management
"""

from django.urls import path

from .views import (
    # Companies
    RegisterCompanyView,
    CompanyDetailView,
    # Groups
    UserGroupListCreateView,
    # Auth
    LoginView,
    LogoutView,
    NewOTPView,
    VerifyOTPView,
    # Users
    RegisterUserView,
    MeView,
    UserListView,
    UserGroupMembersView,
    UserDetailView,
    UserUpdateView,
)

app_name = "accounts"

urlpatterns = [
    # ==========================================================================
    # Companies
    # ==========================================================================
    path("companies/register/", RegisterCompanyView.as_view(), name="company-register"),
    path("companies/", CompanyDetailView.as_view(), name="company-detail"),

    # ==========================================================================
    # User groups
    # ==========================================================================
    path("groups/", UserGroupListCreateView.as_view(), name="group-list"),

    # ==========================================================================
    # Authentication and verification
    # ==========================================================================
    path("users/login/", LoginView.as_view(), name="login"),
    path("users/logout/", LogoutView.as_view(), name="logout"),
    path("users/new-otp/", NewOTPView.as_view(), name="new-otp"),
    path("users/verify-otp/", VerifyOTPView.as_view(), name="verify-otp"),

    # ==========================================================================
    # Users
    # ==========================================================================
    path("users/register/<int:group_id>/", RegisterUserView.as_view(), name="user-register"),
    path("users/", MeView.as_view(), name="me"),
    path("users/all/", UserListView.as_view(), name="user-list"),
    path("users/all/<int:group_id>/", UserGroupMembersView.as_view(), name="group-members"),
    path("users/<str:username>/", UserDetailView.as_view(), name="user-detail"),
    path("users/<str:username>/update/", UserUpdateView.as_view(), name="user-update"),
]
