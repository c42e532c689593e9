import logging
import posixpath
from urllib.parse import unquote

from django.conf import settings
from django.core.files.storage import default_storage

from .exceptions import PlanFileError

logger = logging.getLogger(__name__)


def resolve_plan_file_path(plan):
    """Storage path of the plan's PDF: explicit path, then URL, then upload."""
    if plan.file_path:
        return plan.file_path

    if plan.file_url:
        marker = f"/{settings.PLAN_STORAGE_BUCKET}/"
        if marker in plan.file_url:
            tail = plan.file_url.split(marker, 1)[1]
            if tail:
                return unquote(tail)
        else:
            # a bare storage path stored in the url column
            return plan.file_url

    if plan.file and plan.file.name:
        return plan.file.name

    raise PlanFileError("Plan file not found")


def open_plan_file(file_path):
    """Read the PDF bytes, falling back to the bare filename at the storage root."""
    file_name_only = posixpath.basename(file_path) or file_path
    candidates = [file_path]
    if file_name_only != file_path:
        candidates.append(file_name_only)

    for candidate in candidates:
        if default_storage.exists(candidate):
            if candidate != file_path:
                logger.info("Full path %s missing, using root level %s", file_path, candidate)
            with default_storage.open(candidate, "rb") as fh:
                return fh.read()

    raise PlanFileError(f"Could not open plan file: {file_path}")
