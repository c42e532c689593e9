from django.urls import path

from . import views

urlpatterns = [
    path("plans/upload/", views.upload_plan, name="upload_plan"),
    path("plans/<uuid:plan_id>/extract/", views.start_extraction, name="start_extraction"),
    path("plans/<uuid:plan_id>/cancel/", views.cancel_extraction, name="cancel_extraction"),
    path("plans/<uuid:plan_id>/job/", views.plan_job, name="plan_job"),
    path("plans/<uuid:plan_id>/export/walls.xlsx", views.export_walls_excel, name="export_walls_excel"),
    path("plans/<uuid:plan_id>/export/summary.pdf", views.export_summary_pdf, name="export_summary_pdf"),
    path("jobs/", views.list_jobs, name="list_jobs"),
    path("jobs/clear/", views.clear_completed_jobs, name="clear_completed_jobs"),
    path("jobs/<uuid:job_id>/", views.remove_job, name="remove_job"),
    path("analyze/", views.analyze, name="analyze"),
]
