import json
import logging
from functools import wraps

from django.core.exceptions import ValidationError
from django.http import Http404, HttpResponse, JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from . import analyzer, jobs, reports, task
from .exceptions import AnalysisError, PlanFileError
from .forms import PlanUploadForm
from .materials import UserInputs
from .models import Plan

logger = logging.getLogger(__name__)

USER_INPUT_PARAMS = {
    "deckHeight": ("deck_height", float),
    "studGauge": ("stud_gauge", int),
    "drywallType": ("drywall_type", str),
    "drywallThickness": ("drywall_thickness", str),
    "finishLevel": ("finish_level", int),
    "paintType": ("paint_type", str),
    "paintCoats": ("paint_coats", int),
    "insulationType": ("insulation_type", str),
    "wasteFactor": ("waste_factor", float),
}


def api_view(view):
    """Session auth plus the error-to-JSON translation every endpoint shares."""
    @wraps(view)
    def wrapper(request, *args, **kwargs):
        if not request.user.is_authenticated:
            return JsonResponse({"error": "Not authenticated", "error_code": "auth_failed"}, status=401)
        try:
            return view(request, *args, **kwargs)
        except AnalysisError as e:
            return JsonResponse(e.to_dict(), status=e.http_status)
        except Http404:
            return JsonResponse({"error": "Plan not found", "error_code": "plan_not_found"}, status=404)
        except (PlanFileError, ValidationError) as e:
            return JsonResponse({"error": str(e), "error_code": "plan_not_found"}, status=404)
        except json.JSONDecodeError:
            return JsonResponse({"error": "Invalid JSON body", "error_code": "invalid_request"}, status=400)
        except Exception as e:
            logger.exception("Unhandled error in %s", view.__name__)
            return JsonResponse({"error": str(e), "error_code": "function_error"}, status=500)
    return csrf_exempt(wrapper)


def _json_body(request):
    if not request.body:
        return {}
    data = json.loads(request.body)
    return data if isinstance(data, dict) else {}


def _owned_plan(request, plan_id):
    return get_object_or_404(Plan, pk=plan_id, user=request.user)


@api_view
@require_POST
def upload_plan(request):
    form = PlanUploadForm(request.POST, request.FILES)
    if not form.is_valid():
        return JsonResponse({"error": form.errors.get_json_data(), "error_code": "invalid_upload"}, status=400)

    plan = form.save(commit=False)
    plan.user = request.user
    plan.save()
    plan.file_path = plan.file.name
    plan.file_url = plan.file.url
    plan.save(update_fields=["file_path", "file_url"])
    logger.info("Plan %s uploaded by user %s: %s", plan.pk, request.user.pk, plan.file_path)

    return JsonResponse({
        "success": True,
        "plan": {
            "id": str(plan.pk),
            "name": plan.name,
            "documentType": plan.document_type,
            "filePath": plan.file_path,
            "fileUrl": plan.file_url,
        },
    }, status=201)


@api_view
@require_POST
def start_extraction(request, plan_id):
    plan = _owned_plan(request, plan_id)
    data = _json_body(request)

    job_id = task.start_extraction(
        request.user,
        plan.pk,
        data.get("planName") or plan.name,
        document_type=data.get("documentType") or plan.document_type,
        analysis_config=data.get("analysisConfig"),
    )
    if job_id is None:
        return JsonResponse({"error": "Extraction already in progress", "error_code": "already_running"}, status=409)
    return JsonResponse({"success": True, "jobId": job_id}, status=202)


@api_view
@require_POST
def cancel_extraction(request, plan_id):
    plan = _owned_plan(request, plan_id)
    return JsonResponse({"success": True, "cancelled": task.cancel_extraction(plan.pk)})


@api_view
@require_GET
def plan_job(request, plan_id):
    plan = _owned_plan(request, plan_id)
    job = jobs.get_job_by_plan_id(request.user, plan.pk)
    return JsonResponse({
        "job": jobs.serialize_job(job) if job else None,
        "isExtracting": task.is_extracting(request.user, plan.pk),
    })


@api_view
@require_GET
def list_jobs(request):
    all_jobs = jobs.list_jobs(request.user)
    return JsonResponse({
        "jobs": [jobs.serialize_job(job) for job in all_jobs],
        "activeCount": sum(1 for job in all_jobs if job.is_active),
    })


@api_view
@require_http_methods(["DELETE"])
def remove_job(request, job_id):
    if not jobs.remove_job(request.user, job_id):
        return JsonResponse({"error": "Job not found", "error_code": "job_not_found"}, status=404)
    return JsonResponse({"success": True})


@api_view
@require_POST
def clear_completed_jobs(request):
    return JsonResponse({"success": True, "removed": jobs.clear_completed_jobs(request.user)})


@api_view
@require_POST
def analyze(request):
    return JsonResponse(analyzer.analyze(request.user, _json_body(request)))


def user_inputs_from_query(params):
    """Estimate settings from query parameters; None when none were given."""
    values = {}
    for param, (field_name, cast) in USER_INPUT_PARAMS.items():
        raw = params.get(param)
        if raw in (None, ""):
            continue
        try:
            values[field_name] = cast(raw)
        except ValueError:
            raise AnalysisError("invalid_request", 400, f"Invalid value for {param}: {raw}")
    return UserInputs(**values) if values else None


@api_view
@require_GET
def export_walls_excel(request, plan_id):
    plan = _owned_plan(request, plan_id)
    content = reports.export_wall_takeoff_excel(
        plan, plan.takeoff_items.all(), user_inputs_from_query(request.GET)
    )
    response = HttpResponse(
        content,
        content_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )
    filename = reports.export_filename(plan.name, "Wall_Takeoff", "xlsx")
    response["Content-Disposition"] = f'attachment; filename="{filename}"'
    return response


@api_view
@require_GET
def export_summary_pdf(request, plan_id):
    plan = _owned_plan(request, plan_id)
    content = reports.export_takeoff_pdf(plan, plan.takeoff_items.all())
    response = HttpResponse(content, content_type="application/pdf")
    filename = reports.export_filename(plan.name, "Takeoff_Summary", "pdf")
    response["Content-Disposition"] = f'attachment; filename="{filename}"'
    return response
