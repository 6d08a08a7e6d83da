from django.urls import path

from .views import (
    TaskAcceptView,
    TaskAllView,
    TaskApproveView,
    TaskAssignView,
    TaskCommentsView,
    TaskListCreateView,
)

app_name = "tasks"

urlpatterns = [
    path("", TaskListCreateView.as_view(), name="task-list"),
    path("all/", TaskAllView.as_view(), name="task-all"),
    path("<int:task_id>/accept/", TaskAcceptView.as_view(), name="task-accept"),
    path("<int:task_id>/approve/", TaskApproveView.as_view(), name="task-approve"),
    path("<int:task_id>/assign/", TaskAssignView.as_view(), name="task-assign"),
    path("<int:task_id>/comments/", TaskCommentsView.as_view(), name="task-comments"),
]
