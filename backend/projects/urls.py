from django.urls import path

from .views import FabricatorListCreateView, ProjectDetailView, ProjectListCreateView

app_name = "projects"

urlpatterns = [
    path("", ProjectListCreateView.as_view(), name="project-list"),
    path("fabricators/", FabricatorListCreateView.as_view(), name="fabricator-list"),
    path("<int:pk>/", ProjectDetailView.as_view(), name="project-detail"),
]
