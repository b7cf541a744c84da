import logging
import uuid
from dataclasses import dataclass, field, replace
from typing import Union

from smart_inventory.exceptions import FieldValidationError
from smart_inventory.ingest.csv_parser import ValidationIssue

logger = logging.getLogger("smart_inventory.ingest")

IDLE = "idle"
PREVIEWED = "previewed"
UPLOADING = "uploading"
UPLOADED = "uploaded"
FAILED = "failed"

@dataclass(frozen=True)
class IngestState:
    generation: int = 0
    status: str = IDLE
    filename: str | None = None
    content: bytes = b""
    preview: tuple[dict, ...] = ()
    issues: tuple[ValidationIssue, ...] = ()
    missing_columns: tuple[str, ...] = ()
    result: dict | None = None
    message: str | None = None

    @property
    def can_upload(self) -> bool:
        # content is released once an upload succeeds
        return (self.status in (PREVIEWED, UPLOADED, FAILED) and bool(self.content)
                and bool(self.preview) and not self.issues)

    def ensure_no_issues(self) -> None:
        if self.issues:
            raise FieldValidationError(
                f"Found {len(self.issues)} validation errors. Please review before uploading.",
                code="HAS_ISSUES",
                details={"errors_count": len(self.issues)},
            )

    def to_dict(self) -> dict:
        return {
            "generation": self.generation,
            "status": self.status,
            "filename": self.filename,
            "preview": list(self.preview),
            "errors_count": len(self.issues),
            "errors": [i.to_dict() for i in self.issues],
            "missing_columns": list(self.missing_columns),
            "can_upload": self.can_upload,
            "result": self.result,
            "message": self.message,
        }

@dataclass(frozen=True)
class FileSelected:
    filename: str
    content: bytes
    preview: tuple[dict, ...]
    issues: tuple[ValidationIssue, ...]
    missing_columns: tuple[str, ...] = ()

@dataclass(frozen=True)
class UploadStarted:
    generation: int

@dataclass(frozen=True)
class UploadCompleted:
    generation: int
    success: bool
    message: str
    result: dict | None = None

@dataclass(frozen=True)
class Cleared:
    pass

Action = Union[FileSelected, UploadStarted, UploadCompleted, Cleared]

def reduce(state: IngestState, action: Action) -> IngestState:
    """Apply one user action.

    FileSelected and Cleared start a new generation. Upload actions from an
    older generation are ignored so a slow upload cannot overwrite newer state.
    """
    if isinstance(action, FileSelected):
        return IngestState(
            generation=state.generation + 1,
            status=PREVIEWED,
            filename=action.filename,
            content=action.content,
            preview=action.preview,
            issues=action.issues,
            missing_columns=action.missing_columns,
        )
    if isinstance(action, Cleared):
        return IngestState(generation=state.generation + 1)
    if isinstance(action, UploadStarted):
        if action.generation != state.generation:
            return state
        return replace(state, status=UPLOADING, result=None, message=None)
    if isinstance(action, UploadCompleted):
        if action.generation != state.generation or state.status != UPLOADING:
            return state
        if not action.success:
            return replace(state, status=FAILED, result=action.result, message=action.message)
        # the file is in Boltic now; keep the preview, drop the bytes
        return replace(state, status=UPLOADED, content=b"", result=action.result, message=action.message)
    raise TypeError(f"unknown action {type(action).__name__}")

@dataclass
class IngestSessions:
    """In-process registry of ingest sessions keyed by upload id.

    Holds at most ``max_sessions``; creating one more evicts the oldest.
    """

    max_sessions: int = 100
    _states: dict[str, IngestState] = field(default_factory=dict)

    def create(self) -> str:
        while self._states and len(self._states) >= self.max_sessions:
            oldest = next(iter(self._states))
            logger.info("Evicting ingest session %s", oldest)
            del self._states[oldest]
        upload_id = uuid.uuid4().hex
        self._states[upload_id] = IngestState()
        return upload_id

    def get(self, upload_id: str) -> IngestState | None:
        return self._states.get(upload_id)

    def dispatch(self, upload_id: str, action: Action) -> IngestState | None:
        """Apply ``action``; a session dropped meanwhile stays dropped."""
        current = self._states.get(upload_id)
        if current is None:
            return None
        state = reduce(current, action)
        self._states[upload_id] = state
        return state

    def drop(self, upload_id: str) -> bool:
        return self._states.pop(upload_id, None) is not None
