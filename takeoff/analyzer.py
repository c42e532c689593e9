"""
Plan analysis service: the backend half of the extraction pipeline.

``analyze`` is called in-process by the background runner and over HTTP by
the ``/api/analyze/`` view. It owns every OpenAI call and every write of
OCR text, takeoff rows and plan conversations.
"""
import json
import logging
import re

import openai
from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction

from . import prompts
from .exceptions import AnalysisError
from .mapping import build_takeoff_items, sanitize_item, summarize, summary_message
from .models import OcrText, Plan, PlanConversation, TakeoffItem

logger = logging.getLogger(__name__)

_client = None


def get_client():
    global _client
    if not settings.OPENAI_API_KEY:
        raise AnalysisError("function_error", 500, "OpenAI API key not configured")
    if _client is None:
        _client = openai.OpenAI(api_key=settings.OPENAI_API_KEY)
    return _client


def parse_json_safe(text: str):
    cleaned = re.sub(r"```json\n?", "", text or "")
    cleaned = re.sub(r"```\n?", "", cleaned).strip()
    return json.loads(cleaned)


def _openai_error(error_code, e, **details):
    status = getattr(e, "status_code", None)
    logger.error("OpenAI error (%s): %s", status, e)
    message = getattr(e, "message", None) or str(e)
    return AnalysisError(error_code, 502, status=status, details=message[:200], **details)


def _owned_plan(user, plan_id):
    try:
        plan = Plan.objects.get(pk=plan_id)
    except (Plan.DoesNotExist, ValidationError, ValueError, TypeError):
        raise AnalysisError("plan_not_found", 404, "Plan not found")
    if plan.user_id != user.pk:
        raise AnalysisError("plan_unauthorized", 403, "Not authorized to access this plan")
    return plan


# =================== CHAT ===================
def _data_context(extracted_data):
    by_type = {}
    for item in extracted_data:
        if isinstance(item, dict):
            by_type.setdefault(item.get("item_type"), []).append(item)
    return (
        f"EXTRACTED DATA: {len(extracted_data)} items - Walls: {len(by_type.get('wall', []))}, "
        f"Ceilings: {len(by_type.get('ceiling', []))}, Doors: {len(by_type.get('door', []))}, "
        f"Windows: {len(by_type.get('window', []))}"
    )


def chat(user, plan_id, prompt, extracted_data=None, has_vision_data=False):
    plan = _owned_plan(user, plan_id)
    client = get_client()

    system_message = prompts.CHAT_SYSTEM_PROMPT
    data_context = ""
    if has_vision_data and extracted_data:
        system_message = prompts.CHAT_VISION_SYSTEM_PROMPT
        data_context = _data_context(extracted_data)

    try:
        response = client.chat.completions.create(
            model=settings.OPENAI_CHAT_MODEL,
            messages=[
                {"role": "system", "content": system_message + "\n\n" + data_context},
                {"role": "user", "content": prompt},
            ],
            max_tokens=1000,
        )
    except openai.APIError as e:
        raise _openai_error("openai_http_error", e)

    answer = response.choices[0].message.content or "Could not process request."

    PlanConversation.objects.bulk_create([
        PlanConversation(plan=plan, user=user, role="user", message=prompt),
        PlanConversation(plan=plan, user=user, role="assistant", message=answer),
    ])
    return {"success": True, "response": answer}


# =================== OCR ===================
def extract_ocr_text(user, plan_id, image_url, page_number=None):
    try:
        plan = _owned_plan(user, plan_id)
    except AnalysisError:
        raise AnalysisError("plan_unauthorized", 403, "Plan not found or unauthorized")

    client = get_client()
    logger.info("OCR extraction - plan %s page %s user %s", plan_id, page_number, user.pk)

    try:
        response = client.chat.completions.create(
            model=settings.OPENAI_VISION_MODEL,
            messages=[{
                "role": "user",
                "content": [
                    {"type": "text", "text": prompts.OCR_PROMPT},
                    {"type": "image_url", "image_url": {"url": image_url}},
                ],
            }],
            max_tokens=4000,
        )
    except openai.APIError as e:
        raise _openai_error("openai_ocr_error", e)

    extracted_text = response.choices[0].message.content or ""
    ocr = OcrText.objects.create(
        plan=plan,
        user=user,
        page_number=page_number or 1,
        extracted_text=extracted_text,
    )
    return {
        "success": True,
        "ocrTextId": ocr.pk,
        "extractedText": extracted_text,
        "message": "OCR extraction complete",
    }


# =================== VISION TAKEOFF ===================
def store_takeoff_items(plan, items):
    sanitized = [sanitize_item(item) for item in items]
    logger.info("Inserting %d takeoff items for plan %s", len(sanitized), plan.pk)
    try:
        with transaction.atomic():
            TakeoffItem.objects.bulk_create([TakeoffItem(plan=plan, **row) for row in sanitized])
    except Exception as e:
        logger.error("Takeoff insert failed for plan %s: %s", plan.pk, e)
        raise AnalysisError("db_insert_takeoff_error", 500, "Failed to store takeoff items", details=str(e))
    return len(sanitized)


def extract_with_vision(user, plan_id, image_url, page_number=None, analysis_config=None):
    # ownership is checked before spending an OpenAI call
    plan = _owned_plan(user, plan_id)
    client = get_client()
    logger.info("Vision extraction - plan %s page %s user %s", plan_id, page_number, user.pk)

    try:
        response = client.chat.completions.create(
            model=settings.OPENAI_VISION_MODEL,
            response_format={"type": "json_object"},
            max_tokens=16000,
            messages=[
                {"role": "system", "content": prompts.VISION_SYSTEM_PROMPT},
                {
                    "role": "user",
                    "content": [
                        {"type": "image_url", "image_url": {"url": image_url, "detail": "high"}},
                        {"type": "text", "text": prompts.vision_prompt(analysis_config)},
                    ],
                },
            ],
        )
    except openai.APIError as e:
        raise _openai_error("openai_http_error", e, page=page_number)

    choice = response.choices[0]
    content = choice.message.content or ""
    finish_reason = choice.finish_reason
    logger.info("OpenAI finish_reason=%s usage=%s", finish_reason, getattr(response, "usage", None))
    if finish_reason == "length":
        logger.warning("Response for plan %s page %s truncated by max_tokens", plan_id, page_number)

    try:
        parsed = parse_json_safe(content)
    except json.JSONDecodeError as e:
        logger.error("JSON parse error on page %s: %s (finish_reason=%s)", page_number, e, finish_reason)
        raise AnalysisError(
            "invalid_json_from_model", 502,
            details=str(e),
            sample=content[:200],
            finish_reason=finish_reason,
            page=page_number,
        )
    if not isinstance(parsed, dict):
        raise AnalysisError("invalid_json_from_model", 502, details="Expected a JSON object",
                            sample=content[:200], finish_reason=finish_reason, page=page_number)

    sheet_type = parsed.get("sheet_type") or "Unknown"
    logger.info("Page %s - sheet type: %s", page_number, sheet_type)

    items = build_takeoff_items(parsed, page_number)
    stored = store_takeoff_items(plan, items)
    summary = summarize(parsed)

    return {
        "success": True,
        "sheet_type": sheet_type,
        "drawing_info": parsed.get("drawing_info") or {},
        "extracted": parsed,
        "itemsStored": stored,
        "wallsFound": summary["walls"],
        "summary": summary,
        "wallTypeTotals": parsed.get("wall_type_totals") or [],
        "clarificationsNeeded": parsed.get("clarifications_needed") or [],
        "message": summary_message(sheet_type, stored, summary),
    }


# =================== DISPATCH ===================
def analyze(user, payload: dict):
    action = payload.get("action")
    plan_id = payload.get("planId")

    if not action and payload.get("prompt"):
        return chat(
            user,
            plan_id,
            payload["prompt"],
            extracted_data=payload.get("extractedData") or [],
            has_vision_data=bool(payload.get("hasVisionData")),
        )
    if action == "extract_ocr_text":
        return extract_ocr_text(user, plan_id, payload.get("imageUrl"), payload.get("pageNumber"))
    if action == "extract_with_vision":
        return extract_with_vision(
            user,
            plan_id,
            payload.get("imageUrl"),
            payload.get("pageNumber"),
            payload.get("analysisConfig"),
        )
    raise AnalysisError("unknown_action", 400, f"Unknown action: {action}")
