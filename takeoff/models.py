import os
import uuid

from django.conf import settings
from django.db import models


def plan_upload_path(instance, filename):
    cleaned_name = filename.replace("%", "")
    return f"{settings.PLAN_STORAGE_BUCKET}/{instance.user_id}/{cleaned_name}"


class Plan(models.Model):
    DOCUMENT_TYPES = [
        ("drawings", "Drawings"),
        ("specifications", "Specifications"),
        ("both", "Both"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="plans")
    name = models.CharField(max_length=255)
    file = models.FileField(upload_to=plan_upload_path, null=True, blank=True)
    file_path = models.CharField(max_length=500, null=True, blank=True)
    file_url = models.CharField(max_length=1000, null=True, blank=True)
    document_type = models.CharField(max_length=20, choices=DOCUMENT_TYPES, default="drawings")
    uploaded_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.name

    @property
    def file_name(self):
        if self.file:
            return os.path.basename(self.file.name)
        return None


class BackgroundJob(models.Model):
    TYPES = [("extraction", "Extraction"), ("analysis", "Analysis")]
    STATUSES = [
        ("pending", "Pending"),
        ("processing", "Processing"),
        ("completed", "Completed"),
        ("failed", "Failed"),
    ]
    ACTIVE_STATUSES = ("pending", "processing")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="background_jobs")
    job_type = models.CharField(max_length=20, choices=TYPES, default="extraction")
    plan = models.ForeignKey(Plan, on_delete=models.CASCADE, related_name="jobs")
    plan_name = models.CharField(max_length=255)
    status = models.CharField(max_length=20, choices=STATUSES, default="pending")
    progress = models.FloatField(default=0)
    current_page = models.PositiveIntegerField(default=0)
    total_pages = models.PositiveIntegerField(default=0)
    message = models.CharField(max_length=500, blank=True, default="")
    error = models.TextField(null=True, blank=True)
    results = models.JSONField(null=True, blank=True)
    started_at = models.DateTimeField(auto_now_add=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["started_at"]

    def __str__(self):
        return f"Job {self.id} - {self.plan_name} ({self.status})"

    @property
    def is_active(self):
        return self.status in self.ACTIVE_STATUSES


class TakeoffItem(models.Model):
    plan = models.ForeignKey(Plan, on_delete=models.CASCADE, related_name="takeoff_items")
    page_number = models.PositiveIntegerField(default=1)
    item_type = models.CharField(max_length=100)
    description = models.TextField(null=True, blank=True)
    quantity = models.FloatField(null=True, blank=True)
    unit = models.CharField(max_length=20, null=True, blank=True)
    dimensions = models.JSONField(null=True, blank=True)
    confidence_score = models.FloatField(null=True, blank=True)
    room_name = models.CharField(max_length=255, null=True, blank=True)
    room_number = models.CharField(max_length=100, null=True, blank=True)
    room_area = models.FloatField(null=True, blank=True)
    notes = models.TextField(null=True, blank=True)
    specifications = models.TextField(null=True, blank=True)
    material_spec = models.TextField(null=True, blank=True)

    # walls
    wall_type = models.CharField(max_length=100, null=True, blank=True)
    wall_height = models.FloatField(null=True, blank=True)
    wall_materials = models.JSONField(null=True, blank=True)
    wall_classification = models.CharField(max_length=50, null=True, blank=True)
    linear_footage = models.FloatField(null=True, blank=True)

    # ceilings
    ceiling_type = models.CharField(max_length=100, null=True, blank=True)
    ceiling_type_detail = models.CharField(max_length=255, null=True, blank=True)
    ceiling_area_sqft = models.FloatField(null=True, blank=True)
    ceiling_height = models.CharField(max_length=100, null=True, blank=True)

    # openings
    door_type = models.CharField(max_length=100, null=True, blank=True)
    door_material = models.CharField(max_length=255, null=True, blank=True)
    door_size = models.CharField(max_length=100, null=True, blank=True)
    door_schedule_reference = models.CharField(max_length=255, null=True, blank=True)
    hardware_package = models.CharField(max_length=100, null=True, blank=True)
    hardware_components = models.JSONField(null=True, blank=True)
    window_material = models.CharField(max_length=255, null=True, blank=True)
    window_size = models.CharField(max_length=100, null=True, blank=True)
    window_schedule_reference = models.CharField(max_length=255, null=True, blank=True)

    # sheet / cross references
    sheet_number = models.CharField(max_length=100, null=True, blank=True)
    sheet_title = models.CharField(max_length=255, null=True, blank=True)
    drawing_scale = models.CharField(max_length=100, null=True, blank=True)
    revision_number = models.CharField(max_length=50, null=True, blank=True)
    revision_date = models.CharField(max_length=50, null=True, blank=True)
    detail_references = models.TextField(null=True, blank=True)
    section_references = models.TextField(null=True, blank=True)
    cross_reference_notes = models.TextField(null=True, blank=True)
    spec_reference = models.CharField(max_length=255, null=True, blank=True)
    raw_dimensions = models.TextField(null=True, blank=True)
    calculated_from_scale = models.BooleanField(null=True, blank=True)
    scale_factor = models.FloatField(null=True, blank=True)
    plan_upload_id = models.CharField(max_length=100, null=True, blank=True)
    needs_clarification = models.BooleanField(null=True, blank=True)
    clarification_notes = models.TextField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["page_number", "id"]

    def __str__(self):
        return f"{self.item_type} p{self.page_number}: {self.description or ''}"


class OcrText(models.Model):
    plan = models.ForeignKey(Plan, on_delete=models.CASCADE, related_name="ocr_texts")
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE)
    page_number = models.PositiveIntegerField(default=1)
    extracted_text = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)


class PlanConversation(models.Model):
    ROLES = [("user", "User"), ("assistant", "Assistant")]

    plan = models.ForeignKey(Plan, on_delete=models.CASCADE, related_name="conversations")
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE)
    role = models.CharField(max_length=20, choices=ROLES)
    message = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)
