"""Shared constants and enums used across the application."""

from enum import StrEnum


class PipelineStatus(StrEnum):
    """Overall status of a build pipeline execution."""

    PENDING = "PENDING"
    RUNNING = "RUNNING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class StepStatus(StrEnum):
    """Status of an individual pipeline step."""

    PENDING = "PENDING"
    RUNNING = "RUNNING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    SKIPPED = "SKIPPED"


class BuildStatus(StrEnum):
    """Outcome stored on a BuildHistory row. Downstream code compares on these exact strings."""

    SUCCESS = "success"
    FAILED = "failed"


class StorageBackend(StrEnum):
    """Where asset files live."""

    LOCAL = "local"
    S3 = "s3"


# ═══════════════════════════════════════════════════════════
#  Build workspace layout (other tooling reads these paths)
# ═══════════════════════════════════════════════════════════

CONTENTS_SUBDIR = "contents"
SOURCE_FILENAME = "content.md"
TEMPLATE_FILENAME = "template.tex"
ARTIFACT_FILENAME = "final.pdf"
QR_FILENAME = "qr.png"
HISTORY_SUBDIR = "history"

# Header block delimiter understood by the renderer templates
HEADER_SENTINEL = "--- \n"

# Exit status reported when the renderer binary cannot be started at all
RENDERER_NOT_FOUND_EXIT_CODE = 127
