from django.conf import settings
from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.db import models
from django.utils.translation import gettext_lazy as _


class Company(models.Model):
    company_id = models.CharField(max_length=20, unique=True)
    name = models.CharField(max_length=150, unique=True)
    email = models.EmailField()
    phone = models.CharField(max_length=30)
    logo = models.CharField(max_length=255, blank=True)

    address = models.CharField(max_length=255, blank=True)
    primary_color = models.CharField(max_length=20, blank=True)
    secondary_color = models.CharField(max_length=20, blank=True)
    website = models.URLField(blank=True)
    established = models.CharField(max_length=20, blank=True)
    company_type = models.CharField(max_length=60, blank=True)
    size = models.CharField(max_length=30, blank=True)
    country = models.CharField(max_length=60, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Company")
        verbose_name_plural = _("Companies")

    def save(self, *args, **kwargs):
        self.company_id = self.company_id.upper()
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.company_id} ({self.name})"


class UserGroup(models.Model):
    class AccessLevel(models.TextChoices):
        ADMIN = "admin", _("Admin")
        MANAGER = "manager", _("Manager")
        TEAM_LEAD = "team_lead", _("Team lead")
        TEAM_MEMBER = "team_member", _("Team member")
        GUEST = "guest", _("Guest")

    company = models.ForeignKey(Company, on_delete=models.CASCADE, related_name="user_groups")
    name = models.CharField(max_length=100)
    description = models.TextField(blank=True)
    access_level = models.CharField(max_length=20, choices=AccessLevel.choices)
    # List of extra-field descriptors, see accounts.schema
    field_schema = models.JSONField(default=list, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["company", "name"], name="uniq_group_name_per_company"),
        ]

    def __str__(self):
        return f"{self.name} [{self.access_level}]"


class UserManager(BaseUserManager):
    use_in_migrations = True

    def _create_user(self, username, password, **extra_fields):
        if not username:
            raise ValueError("The given username must be set")
        email = extra_fields.pop("email", "")
        user = self.model(username=username, email=self.normalize_email(email), **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_user(self, username, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        return self._create_user(username, password, **extra_fields)

    def create_superuser(self, username, password, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("verified", True)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True.")

        return self._create_user(username, password, **extra_fields)


class User(AbstractUser):
    """
    Company-scoped user. The username is stored as "{COMPANYID}-{name}"
    so the same short name can exist in several companies.
    """
    first_name = None
    last_name = None

    email = models.EmailField("email address")
    user_group = models.ForeignKey(
        UserGroup,
        on_delete=models.PROTECT,
        related_name="users",
        null=True,
        blank=True,
    )
    verified = models.BooleanField(default=False)
    extras = models.JSONField(default=dict, blank=True)
    profile_image = models.CharField(max_length=255, blank=True)

    REQUIRED_FIELDS = ["email"]

    objects = UserManager()

    @property
    def company(self):
        return self.user_group.company if self.user_group_id else None

    @property
    def access_level(self):
        return self.user_group.access_level if self.user_group_id else None

    def __str__(self):
        return self.username


class OTP(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="otps")
    code = models.CharField(max_length=6)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "OTP"
        indexes = [models.Index(fields=["user", "code"], name="otp_user_code_idx")]

    def __str__(self):
        return f"OTP for {self.user_id}"
