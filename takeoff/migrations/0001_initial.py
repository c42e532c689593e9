import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models

import takeoff.models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Plan",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=255)),
                ("file", models.FileField(blank=True, null=True, upload_to=takeoff.models.plan_upload_path)),
                ("file_path", models.CharField(blank=True, max_length=500, null=True)),
                ("file_url", models.CharField(blank=True, max_length=1000, null=True)),
                ("document_type", models.CharField(
                    choices=[("drawings", "Drawings"), ("specifications", "Specifications"), ("both", "Both")],
                    default="drawings",
                    max_length=20,
                )),
                ("uploaded_at", models.DateTimeField(auto_now_add=True)),
                ("user", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="plans",
                    to=settings.AUTH_USER_MODEL,
                )),
            ],
        ),
        migrations.CreateModel(
            name="BackgroundJob",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("job_type", models.CharField(
                    choices=[("extraction", "Extraction"), ("analysis", "Analysis")],
                    default="extraction",
                    max_length=20,
                )),
                ("plan_name", models.CharField(max_length=255)),
                ("status", models.CharField(
                    choices=[
                        ("pending", "Pending"),
                        ("processing", "Processing"),
                        ("completed", "Completed"),
                        ("failed", "Failed"),
                    ],
                    default="pending",
                    max_length=20,
                )),
                ("progress", models.FloatField(default=0)),
                ("current_page", models.PositiveIntegerField(default=0)),
                ("total_pages", models.PositiveIntegerField(default=0)),
                ("message", models.CharField(blank=True, default="", max_length=500)),
                ("error", models.TextField(blank=True, null=True)),
                ("results", models.JSONField(blank=True, null=True)),
                ("started_at", models.DateTimeField(auto_now_add=True)),
                ("completed_at", models.DateTimeField(blank=True, null=True)),
                ("plan", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="jobs",
                    to="takeoff.plan",
                )),
                ("user", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="background_jobs",
                    to=settings.AUTH_USER_MODEL,
                )),
            ],
            options={
                "ordering": ["started_at"],
            },
        ),
        migrations.CreateModel(
            name="TakeoffItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("page_number", models.PositiveIntegerField(default=1)),
                ("item_type", models.CharField(max_length=100)),
                ("description", models.TextField(blank=True, null=True)),
                ("quantity", models.FloatField(blank=True, null=True)),
                ("unit", models.CharField(blank=True, max_length=20, null=True)),
                ("dimensions", models.JSONField(blank=True, null=True)),
                ("confidence_score", models.FloatField(blank=True, null=True)),
                ("room_name", models.CharField(blank=True, max_length=255, null=True)),
                ("room_number", models.CharField(blank=True, max_length=100, null=True)),
                ("room_area", models.FloatField(blank=True, null=True)),
                ("notes", models.TextField(blank=True, null=True)),
                ("specifications", models.TextField(blank=True, null=True)),
                ("material_spec", models.TextField(blank=True, null=True)),
                ("wall_type", models.CharField(blank=True, max_length=100, null=True)),
                ("wall_height", models.FloatField(blank=True, null=True)),
                ("wall_materials", models.JSONField(blank=True, null=True)),
                ("wall_classification", models.CharField(blank=True, max_length=50, null=True)),
                ("linear_footage", models.FloatField(blank=True, null=True)),
                ("ceiling_type", models.CharField(blank=True, max_length=100, null=True)),
                ("ceiling_type_detail", models.CharField(blank=True, max_length=255, null=True)),
                ("ceiling_area_sqft", models.FloatField(blank=True, null=True)),
                ("ceiling_height", models.CharField(blank=True, max_length=100, null=True)),
                ("door_type", models.CharField(blank=True, max_length=100, null=True)),
                ("door_material", models.CharField(blank=True, max_length=255, null=True)),
                ("door_size", models.CharField(blank=True, max_length=100, null=True)),
                ("door_schedule_reference", models.CharField(blank=True, max_length=255, null=True)),
                ("hardware_package", models.CharField(blank=True, max_length=100, null=True)),
                ("hardware_components", models.JSONField(blank=True, null=True)),
                ("window_material", models.CharField(blank=True, max_length=255, null=True)),
                ("window_size", models.CharField(blank=True, max_length=100, null=True)),
                ("window_schedule_reference", models.CharField(blank=True, max_length=255, null=True)),
                ("sheet_number", models.CharField(blank=True, max_length=100, null=True)),
                ("sheet_title", models.CharField(blank=True, max_length=255, null=True)),
                ("drawing_scale", models.CharField(blank=True, max_length=100, null=True)),
                ("revision_number", models.CharField(blank=True, max_length=50, null=True)),
                ("revision_date", models.CharField(blank=True, max_length=50, null=True)),
                ("detail_references", models.TextField(blank=True, null=True)),
                ("section_references", models.TextField(blank=True, null=True)),
                ("cross_reference_notes", models.TextField(blank=True, null=True)),
                ("spec_reference", models.CharField(blank=True, max_length=255, null=True)),
                ("raw_dimensions", models.TextField(blank=True, null=True)),
                ("calculated_from_scale", models.BooleanField(blank=True, null=True)),
                ("scale_factor", models.FloatField(blank=True, null=True)),
                ("plan_upload_id", models.CharField(blank=True, max_length=100, null=True)),
                ("needs_clarification", models.BooleanField(blank=True, null=True)),
                ("clarification_notes", models.TextField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("plan", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="takeoff_items",
                    to="takeoff.plan",
                )),
            ],
            options={
                "ordering": ["page_number", "id"],
            },
        ),
        migrations.CreateModel(
            name="OcrText",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("page_number", models.PositiveIntegerField(default=1)),
                ("extracted_text", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("plan", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="ocr_texts",
                    to="takeoff.plan",
                )),
                ("user", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    to=settings.AUTH_USER_MODEL,
                )),
            ],
        ),
        migrations.CreateModel(
            name="PlanConversation",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("role", models.CharField(choices=[("user", "User"), ("assistant", "Assistant")], max_length=20)),
                ("message", models.TextField()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("plan", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="conversations",
                    to="takeoff.plan",
                )),
                ("user", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    to=settings.AUTH_USER_MODEL,
                )),
            ],
        ),
    ]
