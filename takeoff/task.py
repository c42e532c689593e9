import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Dict, Optional

from django.conf import settings
from django.db import connection

from . import analyzer, jobs, rasterize, storage
from .exceptions import AnalysisError, PlanFileError
from .models import Plan

logger = logging.getLogger(__name__)

# =================== CONFIG ===================
MAX_WORKERS = settings.EXTRACTION_MAX_WORKERS

executor = ThreadPoolExecutor(max_workers=MAX_WORKERS, thread_name_prefix="extraction")


@dataclass
class ExtractionContext:
    job_id: str
    aborted: bool = False
    future: Any = None


# plan id -> context; outlives the request that started the extraction
_active_extractions: Dict[str, ExtractionContext] = {}
_lock = threading.Lock()


def sleep(seconds):
    if seconds > 0:
        time.sleep(seconds)


def sanitize_config(analysis_config: Optional[dict]) -> Optional[dict]:
    if not analysis_config:
        return None
    takeoff_items = analysis_config.get("takeoffItems")
    spec_divisions = analysis_config.get("specDivisions")
    return {
        "drawingScale": analysis_config.get("drawingScale") or None,
        "takeoffItems": takeoff_items if isinstance(takeoff_items, list) else [],
        "specDivisions": spec_divisions if isinstance(spec_divisions, list) else [],
    }


def build_payload(plan_id, document_type, image_url, page_number, analysis_config):
    if document_type == "specifications":
        return {
            "planId": plan_id,
            "action": "extract_ocr_text",
            "imageUrl": image_url,
            "pageNumber": page_number,
        }
    return {
        "planId": plan_id,
        "action": "extract_with_vision",
        "imageUrl": image_url,
        "pageNumber": page_number,
        "analysisConfig": sanitize_config(analysis_config),
    }


def analyze_page_with_retry(user, payload, max_retries=None, retry_delay=None):
    """
    Call the analyzer for one page, retrying failures with a linear backoff
    of ``retry_delay * attempt`` seconds. Re-raises the last error once the
    retries are spent or the error is not worth retrying.
    """
    max_retries = settings.EXTRACTION_MAX_RETRIES if max_retries is None else max_retries
    retry_delay = settings.EXTRACTION_RETRY_DELAY if retry_delay is None else retry_delay
    page = payload.get("pageNumber")

    retries = 0
    while True:
        try:
            return analyzer.analyze(user, payload)
        except AnalysisError as e:
            if not e.retryable or retries >= max_retries:
                raise
            logger.warning("Page %s failed (%s), retrying (%d/%d)...", page, e.error_code, retries + 1, max_retries)
        except Exception as e:
            if retries >= max_retries:
                raise
            logger.warning("Page %s invoke error: %s, retrying (%d/%d)...", page, e, retries + 1, max_retries)
        sleep(retry_delay * (retries + 1))
        retries += 1


def _load_pdf(job_id, user, plan_id):
    jobs.update_job(job_id, status="processing", message="Loading plan file...")

    plan = Plan.objects.filter(pk=plan_id, user=user).first()
    if plan is None:
        raise PlanFileError("Plan not found in database")

    file_path = storage.resolve_plan_file_path(plan)
    logger.info("Original file path: %s", file_path)
    data = storage.open_plan_file(file_path)

    jobs.update_job(job_id, progress=10, message="Loading PDF...")
    return rasterize.open_pdf(data)


# =================== MAIN EXTRACTION WITH LIVE PROGRESS ===================
def run_extraction(job_id, user, plan_id, document_type, analysis_config, context):
    plan_id = str(plan_id)
    doc = None
    try:
        doc = _load_pdf(job_id, user, plan_id)
        num_pages = rasterize.page_count(doc)
        jobs.update_job(job_id, progress=15, total_pages=num_pages, message=f"Found {num_pages} pages")

        items_extracted = 0
        walls_found = 0
        pages_processed = 0

        for i in range(1, num_pages + 1):
            if context.aborted:
                jobs.update_job(job_id, status="failed", error="Extraction cancelled", message="Cancelled by user")
                return

            jobs.update_job(
                job_id,
                current_page=i,
                progress=15 + ((i - 1) / num_pages) * 80,
                message=f"Processing page {i} of {num_pages}...",
            )

            try:
                image_url = rasterize.page_to_data_url(doc, i)
                logger.info("Page %d image size: %d KB", i, rasterize.data_url_size_kb(image_url))

                payload = build_payload(plan_id, document_type, image_url, i, analysis_config)
                data = analyze_page_with_retry(user, payload)

                items_extracted += data.get("itemsStored") or 0
                walls_found += data.get("wallsFound") or 0
                pages_processed += 1
                jobs.update_job(
                    job_id,
                    message=f"Page {i}/{num_pages} - {items_extracted} items found ({data.get('sheet_type') or 'Unknown'})",
                    results={
                        "itemsExtracted": items_extracted,
                        "wallsFound": walls_found,
                        "pagesProcessed": pages_processed,
                    },
                )
            except Exception as e:
                # a bad page never stops the plan; it still counts as processed
                logger.error("Error processing page %d of plan %s: %s", i, plan_id, e)
                pages_processed += 1
                continue

            if i < num_pages:
                sleep(settings.EXTRACTION_PAGE_DELAY)

        jobs.mark_completed(
            job_id,
            num_pages,
            {
                "itemsExtracted": items_extracted,
                "wallsFound": walls_found,
                "pagesProcessed": pages_processed,
            },
        )
        logger.info("Extraction of plan %s completed: %d items", plan_id, items_extracted)

    except Exception as e:
        logger.exception("Extraction error for plan %s", plan_id)
        jobs.update_job(job_id, status="failed", error=str(e) or "Unknown error", message="Extraction failed")
    finally:
        if doc is not None:
            doc.close()
        with _lock:
            if _active_extractions.get(plan_id) is context:
                del _active_extractions[plan_id]


def _run_in_thread(*args):
    try:
        run_extraction(*args)
    finally:
        connection.close()


def start_extraction(user, plan_id, plan_name, document_type="drawings", analysis_config=None):
    """Queue a background extraction; returns the job id, or None if one is already running."""
    plan_id = str(plan_id)
    plan = Plan.objects.filter(pk=plan_id, user=user).first()
    if plan is None:
        raise PlanFileError("Plan not found in database")

    with _lock:
        if plan_id in _active_extractions or jobs.has_active_job(user, plan_id):
            logger.info("Extraction already in progress for plan %s", plan_id)
            return None

        job_id = jobs.add_job(user, plan, plan_name, job_type="extraction", message="Starting extraction...")
        context = ExtractionContext(job_id=job_id)
        _active_extractions[plan_id] = context

    context.future = executor.submit(
        _run_in_thread, job_id, user, plan_id, document_type, analysis_config, context
    )
    return job_id


def cancel_extraction(plan_id):
    """
    Abort the running extraction for a plan. A job left active by a process
    that died has nothing to abort, so it is failed here instead.
    """
    with _lock:
        context = _active_extractions.get(str(plan_id))
    if context is None:
        return jobs.fail_interrupted_jobs(plan_id) > 0
    context.aborted = True
    return True


def is_extracting(user, plan_id):
    with _lock:
        running = str(plan_id) in _active_extractions
    return running or jobs.has_active_job(user, plan_id)
