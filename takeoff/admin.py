from django.contrib import admin

from .models import BackgroundJob, Plan, TakeoffItem


@admin.register(Plan)
class PlanAdmin(admin.ModelAdmin):
    list_display = ("name", "user", "document_type", "uploaded_at")
    search_fields = ("name",)


@admin.register(BackgroundJob)
class BackgroundJobAdmin(admin.ModelAdmin):
    list_display = ("plan_name", "user", "status", "progress", "current_page", "total_pages", "started_at")
    list_filter = ("status", "job_type")


@admin.register(TakeoffItem)
class TakeoffItemAdmin(admin.ModelAdmin):
    list_display = ("plan", "page_number", "item_type", "quantity", "unit", "confidence_score")
    list_filter = ("item_type",)
