import json
from types import SimpleNamespace
from unittest import mock

import fitz
import pytest
from django.core.files.base import ContentFile

from takeoff import analyzer, task
from takeoff.models import Plan


@pytest.fixture(autouse=True)
def extraction_settings(settings, tmp_path):
    settings.MEDIA_ROOT = str(tmp_path / "media")
    settings.OPENAI_API_KEY = "test-key"
    settings.EXTRACTION_RETRY_DELAY = 0
    settings.EXTRACTION_PAGE_DELAY = 0
    settings.CHANNEL_LAYERS = {"default": {"BACKEND": "channels.layers.InMemoryChannelLayer"}}
    return settings


@pytest.fixture(autouse=True)
def clear_active_extractions():
    task._active_extractions.clear()
    yield
    task._active_extractions.clear()


@pytest.fixture
def user(django_user_model):
    return django_user_model.objects.create_user(username="estimator", password="secret")


@pytest.fixture
def other_user(django_user_model):
    return django_user_model.objects.create_user(username="someone-else", password="secret")


def make_pdf(pages=1, width=612, height=792):
    doc = fitz.open()
    for number in range(1, pages + 1):
        page = doc.new_page(width=width, height=height)
        page.insert_text((72, 72), f"A1.0{number} FLOOR PLAN")
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def pdf_factory():
    return make_pdf


@pytest.fixture
def plan_factory(user):
    def create(pages=1, name="Riverside Lofts", owner=None, document_type="drawings", **pdf_kwargs):
        plan = Plan(user=owner or user, name=name, document_type=document_type)
        plan.file.save("plan.pdf", ContentFile(make_pdf(pages, **pdf_kwargs)), save=False)
        plan.file_path = plan.file.name
        plan.save()
        return plan
    return create


@pytest.fixture
def plan(plan_factory):
    return plan_factory(pages=2)


def completion(content, finish_reason="stop"):
    if not isinstance(content, str):
        content = json.dumps(content)
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content), finish_reason=finish_reason)],
        usage=SimpleNamespace(prompt_tokens=1000, completion_tokens=200),
    )


@pytest.fixture
def openai_client(monkeypatch):
    client = mock.MagicMock()
    monkeypatch.setattr(analyzer, "get_client", lambda: client)
    return client


@pytest.fixture
def sheet_json():
    return {
        "sheet_type": "FLOOR PLAN",
        "drawing_info": {"sheet_number": "A1.01", "title": "Level 1 Floor Plan", "scale": "1/4\" = 1'-0\""},
        "wall_types_legend": [
            {
                "type_code": "A1",
                "description": "3-5/8\" metal stud, 1 layer 5/8\" type X each side",
                "stud_size": "3-5/8\"",
                "stud_gauge": "20",
                "stud_spacing": "16\" o.c.",
                "drywall_layers_each_side": 1,
                "drywall_type": "type_x",
                "fire_rating": "1 HR",
                "insulation": "sound batt",
                "confidence": 92,
            }
        ],
        "walls": [
            {"wall_type_code": "A1", "length_ft": 24.5, "room_name": "Unit 101", "confidence": 88,
             "coordinates": {"start_x": 10, "start_y": 10, "end_x": 40, "end_y": 10}},
            {"wall_type_code": "A1", "length_ft": "12'", "room_name": "Corridor", "is_exterior": True},
        ],
        "doors": [{"mark": "101A", "width": "3'-0\"", "height": "7'-0\"", "door_type": "fire_rated", "quantity": 2}],
        "rooms": [{"room_name": "Unit 101", "room_number": "101", "area_sqft": "N/A", "confidence": 140}],
        "clarifications_needed": [{"question": "Confirm corridor wall rating", "affects": "A1"}],
    }
