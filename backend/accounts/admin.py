from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin

from .models import Company, OTP, User, UserGroup


@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    fieldsets = (
        (None, {"fields": ("username", "email", "password", "user_group", "verified")}),
        ("Profile", {"fields": ("extras", "profile_image")}),
        ("Permissions", {"fields": ("is_active", "is_staff", "is_superuser")}),
        ("Important dates", {"fields": ("last_login", "date_joined")}),
    )
    add_fieldsets = (
        (None, {"classes": ("wide",), "fields": ("username", "email", "user_group", "password1", "password2")}),
    )
    list_display = ("username", "email", "user_group", "verified", "is_staff")
    list_filter = ("verified", "user_group__access_level")
    search_fields = ("username", "email")
    ordering = ("username",)


@admin.register(Company)
class CompanyAdmin(admin.ModelAdmin):
    list_display = ("company_id", "name", "email", "phone", "created_at")
    search_fields = ("company_id", "name", "email")


@admin.register(UserGroup)
class UserGroupAdmin(admin.ModelAdmin):
    list_display = ("name", "company", "access_level")
    list_filter = ("access_level",)
    search_fields = ("name", "company__name")


@admin.register(OTP)
class OTPAdmin(admin.ModelAdmin):
    list_display = ("user", "created_at")
    readonly_fields = ("code",)
