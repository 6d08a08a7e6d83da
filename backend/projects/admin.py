from django.contrib import admin

from .models import Fabricator, Project


@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    list_display = ("name", "company", "team_leader", "fabricator", "start_date", "end_date")
    list_filter = ("company",)
    search_fields = ("name", "team_leader__username")


@admin.register(Fabricator)
class FabricatorAdmin(admin.ModelAdmin):
    list_display = ("name", "company", "contact_email", "phone")
    search_fields = ("name",)
