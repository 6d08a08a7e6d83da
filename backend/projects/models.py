# projects/models.py
"""
Projects and fabricators.

A project belongs to one company and has a team leader, who takes part in
the task workflow (see tasks.policies). A fabricator is an external party
a company builds projects for.
"""

from django.conf import settings
from django.db import models


class Fabricator(models.Model):
    company = models.ForeignKey("accounts.Company", on_delete=models.CASCADE, related_name="fabricators")
    name = models.CharField(max_length=150)
    contact_email = models.EmailField(blank=True)
    phone = models.CharField(max_length=30, blank=True)
    address = models.CharField(max_length=255, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["company", "name"], name="uniq_fabricator_per_company"),
        ]

    def __str__(self):
        return self.name


class Project(models.Model):
    company = models.ForeignKey("accounts.Company", on_delete=models.CASCADE, related_name="projects")
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    team_leader = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="led_projects",
    )
    fabricator = models.ForeignKey(
        Fabricator,
        on_delete=models.SET_NULL,
        related_name="projects",
        null=True,
        blank=True,
    )
    start_date = models.DateField(null=True, blank=True)
    end_date = models.DateField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return self.name
