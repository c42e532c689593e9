from unittest import mock

import pytest

from takeoff import analyzer, task
from takeoff.exceptions import AnalysisError
from takeoff.models import BackgroundJob, TakeoffItem

from .conftest import completion

pytestmark = pytest.mark.django_db


@pytest.fixture
def executor(monkeypatch):
    fake = mock.MagicMock()
    monkeypatch.setattr(task, "executor", fake)
    return fake


@pytest.fixture
def waits(monkeypatch):
    calls = []
    monkeypatch.setattr(task, "sleep", calls.append)
    return calls


@pytest.fixture
def progress(monkeypatch):
    """Every update the runner makes, in order."""
    updates = []
    real_update = task.jobs.update_job

    def record(job_id, **fields):
        updates.append(fields)
        return real_update(job_id, **fields)

    monkeypatch.setattr(task.jobs, "update_job", record)
    return updates


def start(user, plan, executor, **kwargs):
    job_id = task.start_extraction(user, plan.pk, plan.name, **kwargs)
    args = executor.submit.call_args.args
    assert args[0] is task._run_in_thread
    return job_id, args[1:]


def test_sanitize_config():
    assert task.sanitize_config(None) is None
    assert task.sanitize_config({"drawingScale": "", "takeoffItems": "walls", "specDivisions": ["09"]}) == {
        "drawingScale": None,
        "takeoffItems": [],
        "specDivisions": ["09"],
    }


def test_build_payload_by_document_type():
    ocr = task.build_payload("p1", "specifications", "data:x", 3, {"specDivisions": ["09"]})
    assert ocr == {"planId": "p1", "action": "extract_ocr_text", "imageUrl": "data:x", "pageNumber": 3}

    vision = task.build_payload("p1", "drawings", "data:x", 1, None)
    assert vision["action"] == "extract_with_vision"
    assert vision["analysisConfig"] is None


def test_retry_backoff_then_success(user, monkeypatch, waits):
    calls = mock.MagicMock(side_effect=[RuntimeError("timeout"), AnalysisError("openai_http_error", 502), {"ok": 1}])
    monkeypatch.setattr(analyzer, "analyze", calls)

    assert task.analyze_page_with_retry(user, {"pageNumber": 1}, retry_delay=2.0) == {"ok": 1}
    assert calls.call_count == 3
    assert waits == [2.0, 4.0]


def test_retries_are_bounded(user, monkeypatch, waits):
    calls = mock.MagicMock(side_effect=AnalysisError("invalid_json_from_model", 502))
    monkeypatch.setattr(analyzer, "analyze", calls)

    with pytest.raises(AnalysisError):
        task.analyze_page_with_retry(user, {"pageNumber": 1}, max_retries=2, retry_delay=1.0)
    assert calls.call_count == 3
    assert waits == [1.0, 2.0]


def test_client_errors_are_not_retried(user, monkeypatch, waits):
    calls = mock.MagicMock(side_effect=AnalysisError("plan_unauthorized", 403))
    monkeypatch.setattr(analyzer, "analyze", calls)

    with pytest.raises(AnalysisError):
        task.analyze_page_with_retry(user, {"pageNumber": 1})
    assert calls.call_count == 1
    assert waits == []


def test_start_extraction_registers_and_submits(user, plan, executor):
    job_id, args = start(user, plan, executor, analysis_config={"drawingScale": "1/4"})

    job = BackgroundJob.objects.get(pk=job_id)
    assert job.status == "pending"
    assert job.message == "Starting extraction..."
    assert args[:5] == (job_id, user, str(plan.pk), "drawings", {"drawingScale": "1/4"})
    assert task.is_extracting(user, plan.pk)


def test_second_start_is_refused(user, plan, executor):
    first, _ = start(user, plan, executor)
    assert task.start_extraction(user, plan.pk, plan.name) is None
    assert executor.submit.call_count == 1
    assert BackgroundJob.objects.filter(plan=plan).count() == 1

    # a persisted active job blocks a restart after the in-process registry is lost
    task._active_extractions.clear()
    assert task.start_extraction(user, plan.pk, plan.name) is None


def test_full_run_reports_progress(user, plan, executor, openai_client, sheet_json, progress, waits):
    openai_client.chat.completions.create.return_value = completion(sheet_json)
    job_id, args = start(user, plan, executor)

    task.run_extraction(*args)

    job = BackgroundJob.objects.get(pk=job_id)
    assert job.status == "completed"
    assert job.progress == 100
    assert job.current_page == job.total_pages == 2
    assert job.message == "Extraction complete!"
    assert job.results == {"itemsExtracted": 14, "wallsFound": 4, "pagesProcessed": 2}
    assert TakeoffItem.objects.filter(plan=plan).count() == 14

    messages = [u.get("message") for u in progress if "message" in u]
    assert messages == [
        "Loading plan file...",
        "Loading PDF...",
        "Found 2 pages",
        "Processing page 1 of 2...",
        "Page 1/2 - 7 items found (FLOOR PLAN)",
        "Processing page 2 of 2...",
        "Page 2/2 - 14 items found (FLOOR PLAN)",
        "Extraction complete!",
    ]
    assert [u["progress"] for u in progress if "current_page" in u and "progress" in u][:2] == [15, 55]
    # one pause between the two pages, none after the last
    assert waits == [0]
    assert not task.is_extracting(user, plan.pk)


def test_failed_page_is_skipped(user, plan, executor, monkeypatch, progress, waits):
    results = [{"itemsStored": 5, "wallsFound": 1, "sheet_type": "FLOOR PLAN"}]

    def analyze(user, payload):
        if payload["pageNumber"] == 1:
            raise AnalysisError("openai_http_error", 502)
        return results.pop()

    monkeypatch.setattr(analyzer, "analyze", analyze)
    job_id, args = start(user, plan, executor)

    task.run_extraction(*args)

    job = BackgroundJob.objects.get(pk=job_id)
    assert job.status == "completed"
    assert job.results == {"itemsExtracted": 5, "wallsFound": 1, "pagesProcessed": 2}
    # two retry waits on page 1; a failed page skips the pause between pages
    assert len(waits) == 2


def test_specifications_use_ocr(user, plan_factory, executor, monkeypatch, waits):
    plan = plan_factory(pages=1, document_type="specifications")
    seen = []

    def analyze(user, payload):
        seen.append(payload)
        return {"success": True, "ocrTextId": 1}

    monkeypatch.setattr(analyzer, "analyze", analyze)
    job_id, args = start(user, plan, executor, document_type="specifications")
    task.run_extraction(*args)

    assert [p["action"] for p in seen] == ["extract_ocr_text"]
    assert seen[0]["imageUrl"].startswith("data:image/jpeg;base64,")
    job = BackgroundJob.objects.get(pk=job_id)
    assert job.status == "completed"
    assert job.results == {"itemsExtracted": 0, "wallsFound": 0, "pagesProcessed": 1}


def test_cancel_stops_before_next_page(user, plan, executor, monkeypatch, waits):
    def analyze(user, payload):
        task.cancel_extraction(payload["planId"])
        return {"itemsStored": 3, "sheet_type": "FLOOR PLAN"}

    monkeypatch.setattr(analyzer, "analyze", analyze)
    job_id, args = start(user, plan, executor)

    task.run_extraction(*args)

    job = BackgroundJob.objects.get(pk=job_id)
    assert job.status == "failed"
    assert job.error == "Extraction cancelled"
    assert job.message == "Cancelled by user"
    assert job.current_page == 1
    assert str(plan.pk) not in task._active_extractions


def test_cancel_without_extraction(plan):
    assert task.cancel_extraction(plan.pk) is False


def test_cancel_fails_job_orphaned_by_dead_process(user, plan, executor):
    job_id, _ = start(user, plan, executor)
    BackgroundJob.objects.filter(pk=job_id).update(status="processing")
    task._active_extractions.clear()

    assert task.cancel_extraction(plan.pk) is True

    job = BackgroundJob.objects.get(pk=job_id)
    assert job.status == "failed"
    assert job.error == "Extraction interrupted"
    assert not task.is_extracting(user, plan.pk)
    assert task.start_extraction(user, plan.pk, plan.name) is not None


def test_pdf_is_closed_after_run(user, plan, executor, monkeypatch, waits):
    opened = []
    real_open = task.rasterize.open_pdf

    def open_pdf(data):
        doc = real_open(data)
        opened.append(doc)
        return doc

    monkeypatch.setattr(task.rasterize, "open_pdf", open_pdf)
    monkeypatch.setattr(analyzer, "analyze", lambda user, payload: {"itemsStored": 1, "sheet_type": "FLOOR PLAN"})
    job_id, args = start(user, plan, executor)

    task.run_extraction(*args)

    [doc] = opened
    assert doc.is_closed


def test_missing_file_fails_job(user, plan, executor):
    job_id, args = start(user, plan, executor)
    plan.file.delete(save=False)

    task.run_extraction(*args)

    job = BackgroundJob.objects.get(pk=job_id)
    assert job.status == "failed"
    assert job.message == "Extraction failed"
    assert "Could not open plan file" in job.error
    assert not task.is_extracting(user, plan.pk)
