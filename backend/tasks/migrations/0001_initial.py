import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("projects", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Task",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=255)),
                ("description", models.TextField()),
                ("start_date", models.DateField()),
                ("due_date", models.DateField()),
                ("status", models.CharField(
                    choices=[("open", "Open"), ("in progress", "In progress")],
                    default="open",
                    max_length=20,
                )),
                ("priority", models.PositiveSmallIntegerField(
                    choices=[(1, "Low"), (2, "Medium"), (3, "High"), (4, "Critical")],
                    default=1,
                )),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("created_by", models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name="created_tasks",
                    to=settings.AUTH_USER_MODEL,
                )),
                ("current_user", models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name="current_tasks",
                    to=settings.AUTH_USER_MODEL,
                )),
                ("project", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="tasks",
                    to="projects.project",
                )),
            ],
            options={
                "indexes": [
                    models.Index(fields=["current_user", "priority"], name="task_assignee_priority_idx"),
                    models.Index(fields=["project", "status"], name="task_project_status_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="TaskAssignment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("approved", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("assigned_by", models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name="+",
                    to=settings.AUTH_USER_MODEL,
                )),
                ("assigned_to", models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name="task_assignments",
                    to=settings.AUTH_USER_MODEL,
                )),
                ("task", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="assignments",
                    to="tasks.task",
                )),
            ],
            options={
                "ordering": ["id"],
            },
        ),
        migrations.CreateModel(
            name="TaskComment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("text", models.TextField()),
                ("files", models.JSONField(blank=True, default=list)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("commented_by", models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name="task_comments",
                    to=settings.AUTH_USER_MODEL,
                )),
                ("task", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="comments",
                    to="tasks.task",
                )),
            ],
            options={
                "ordering": ["id"],
            },
        ),
    ]
