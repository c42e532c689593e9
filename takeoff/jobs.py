"""
Background job registry.

Jobs are plain rows in ``BackgroundJob``; the status field is the whole state
machine. Every change is pushed to the owner's sockets, and entering a
terminal status additionally sends a one-off notification.
"""
import logging

from django.utils import timezone

from .models import BackgroundJob
from .notify import notify_user

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = {
    "status",
    "progress",
    "current_page",
    "total_pages",
    "message",
    "error",
    "results",
    "completed_at",
}


def serialize_job(job):
    return {
        "id": str(job.id),
        "type": job.job_type,
        "planId": str(job.plan_id),
        "planName": job.plan_name,
        "status": job.status,
        "progress": job.progress,
        "currentPage": job.current_page,
        "totalPages": job.total_pages,
        "message": job.message,
        "startedAt": job.started_at.isoformat() if job.started_at else None,
        "completedAt": job.completed_at.isoformat() if job.completed_at else None,
        "error": job.error,
        "results": job.results,
    }


def _notify(job, title, description, variant="default"):
    notify_user(
        job.user_id,
        "job.notification",
        job_id=str(job.id),
        title=title,
        description=description,
        variant=variant,
    )


def add_job(user, plan, plan_name, job_type="extraction", **fields):
    job = BackgroundJob.objects.create(
        user=user,
        plan=plan,
        plan_name=plan_name,
        job_type=job_type,
        status=fields.pop("status", "pending"),
        progress=fields.pop("progress", 0),
        current_page=fields.pop("current_page", 0),
        total_pages=fields.pop("total_pages", 0),
        message=fields.pop("message", ""),
    )
    logger.info("Job %s created for plan %s", job.id, plan.pk)
    _notify(job, "Extraction Started", f"Processing {plan_name} in the background. You can navigate away.")
    notify_user(job.user_id, "job.updated", job=serialize_job(job))
    return str(job.id)


def update_job(job_id, **updates):
    unknown = set(updates) - UPDATABLE_FIELDS
    if unknown:
        raise ValueError(f"Cannot update job fields: {', '.join(sorted(unknown))}")

    job = BackgroundJob.objects.filter(pk=job_id).first()
    if job is None:
        logger.warning("Job %s vanished before update", job_id)
        return None

    previous_status = job.status
    for key, value in updates.items():
        setattr(job, key, value)
    job.save(update_fields=list(updates))

    new_status = updates.get("status")
    if new_status == "completed" and previous_status != "completed":
        results = updates.get("results") or {}
        _notify(
            job,
            "Extraction Complete!",
            f"{job.plan_name}: {results.get('itemsExtracted') or 0} items extracted "
            f"from {results.get('pagesProcessed') or 0} pages.",
        )
    elif new_status == "failed" and previous_status != "failed":
        _notify(
            job,
            "Extraction Failed",
            f"{job.plan_name}: {updates.get('error') or 'Unknown error'}",
            variant="destructive",
        )

    notify_user(job.user_id, "job.updated", job=serialize_job(job))
    return job


def remove_job(user, job_id):
    deleted, _ = BackgroundJob.objects.filter(user=user, pk=job_id).delete()
    return deleted > 0


def clear_completed_jobs(user):
    deleted, _ = (
        BackgroundJob.objects.filter(user=user)
        .exclude(status__in=BackgroundJob.ACTIVE_STATUSES)
        .delete()
    )
    return deleted


def list_jobs(user):
    return list(BackgroundJob.objects.filter(user=user))


def active_jobs(user):
    return list(BackgroundJob.objects.filter(user=user, status__in=BackgroundJob.ACTIVE_STATUSES))


def get_job_by_plan_id(user, plan_id):
    return BackgroundJob.objects.filter(user=user, plan_id=plan_id).order_by("-started_at").first()


def has_active_job(user, plan_id):
    return BackgroundJob.objects.filter(
        user=user, plan_id=plan_id, status__in=BackgroundJob.ACTIVE_STATUSES
    ).exists()


def mark_completed(job_id, total_pages, results):
    return update_job(
        job_id,
        status="completed",
        progress=100,
        current_page=total_pages,
        message="Extraction complete!",
        completed_at=timezone.now(),
        results=results,
    )


def fail_interrupted_jobs(plan_id):
    """Fail active jobs for a plan that no live extraction owns anymore."""
    interrupted = list(
        BackgroundJob.objects.filter(plan_id=plan_id, status__in=BackgroundJob.ACTIVE_STATUSES).values_list(
            "pk", flat=True
        )
    )
    for job_id in interrupted:
        logger.warning("Job %s for plan %s has no running extraction, marking it failed", job_id, plan_id)
        update_job(job_id, status="failed", error="Extraction interrupted", message="Extraction interrupted")
    return len(interrupted)
