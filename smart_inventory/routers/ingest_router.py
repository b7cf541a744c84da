from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.responses import Response

from smart_inventory.db.boltic import BolticClient
from smart_inventory.db.session import get_boltic_client, get_settings
from smart_inventory.exceptions import (
    EmptyInputError,
    FieldValidationError,
    FileParseError,
    NetworkError,
)
from smart_inventory.ingest.csv_parser import error_report_csv, parse_sales_csv
from smart_inventory.ingest.normalizer import normalize_rows
from smart_inventory.ingest.state import (
    Cleared,
    FileSelected,
    IngestSessions,
    IngestState,
    UploadCompleted,
    UploadStarted,
)
from smart_inventory.ingest.upsert import ingest_sales

router = APIRouter()

sessions = IngestSessions(max_sessions=get_settings().MAX_INGEST_SESSIONS)

def get_sessions() -> IngestSessions:
    return sessions

def _require(store: IngestSessions, upload_id: str) -> IngestState:
    state = store.get(upload_id)
    if state is None:
        raise HTTPException(status_code=404, detail="Upload not found")
    return state

async def _preview(store: IngestSessions, upload_id: str, file: UploadFile) -> IngestState:
    content = await file.read()
    try:
        parsed = parse_sales_csv(content, file.filename or "", limit=get_settings().PREVIEW_ROWS)
    except FileParseError as e:
        raise HTTPException(status_code=400, detail=f"Failed to parse CSV: {e.message}")

    return store.dispatch(upload_id, FileSelected(
        filename=file.filename,
        content=content,
        preview=tuple(parsed.raw_rows),
        issues=tuple(parsed.issues),
        missing_columns=tuple(parsed.missing_columns),
    ))

@router.post("/preview")
async def preview_upload(
    file: UploadFile = File(...),
    store: IngestSessions = Depends(get_sessions),
):
    upload_id = store.create()
    try:
        state = await _preview(store, upload_id, file)
    except HTTPException:
        store.drop(upload_id)
        raise
    return {"upload_id": upload_id, **state.to_dict()}

@router.put("/{upload_id}")
async def replace_file(
    upload_id: str,
    file: UploadFile = File(...),
    store: IngestSessions = Depends(get_sessions),
):
    _require(store, upload_id)
    state = await _preview(store, upload_id, file)
    return {"upload_id": upload_id, **state.to_dict()}

@router.get("/{upload_id}")
def get_upload(upload_id: str, store: IngestSessions = Depends(get_sessions)):
    return {"upload_id": upload_id, **_require(store, upload_id).to_dict()}

@router.get("/{upload_id}/error-report")
def download_error_report(upload_id: str, store: IngestSessions = Depends(get_sessions)):
    state = _require(store, upload_id)
    return Response(
        content=error_report_csv(list(state.issues)),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="import_error_report.csv"'},
    )

@router.post("/{upload_id}/commit")
async def commit_upload(
    upload_id: str,
    store: IngestSessions = Depends(get_sessions),
    client: BolticClient = Depends(get_boltic_client),
):
    state = _require(store, upload_id)
    try:
        state.ensure_no_issues()
    except FieldValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    if not state.can_upload:
        raise HTTPException(status_code=409, detail=f"Upload is {state.status}")

    generation = state.generation
    store.dispatch(upload_id, UploadStarted(generation))

    try:
        # Full file this time; preview validation only covered the first rows
        parsed = parse_sales_csv(state.content, state.filename or "")
        records = normalize_rows(parsed.rows)
    except FileParseError as e:
        store.dispatch(upload_id, UploadCompleted(generation, success=False, message=e.message))
        raise HTTPException(status_code=400, detail=f"Failed to parse CSV: {e.message}")
    except EmptyInputError as e:
        store.dispatch(upload_id, UploadCompleted(generation, success=False, message=e.message))
        raise HTTPException(status_code=422, detail=e.message)

    try:
        outcome = await ingest_sales(
            client, records, workflow_id=get_settings().SALES_SYNC_WORKFLOW
        )
    except NetworkError as e:
        message = f"Error: {e.message}"
        store.dispatch(upload_id, UploadCompleted(generation, success=False, message=message))
        raise HTTPException(status_code=502, detail=message)

    result = outcome.to_dict()
    state = store.dispatch(upload_id, UploadCompleted(
        generation,
        success=outcome.primary.success,
        message=outcome.primary.message,
        result=result,
    ))
    return {"upload_id": upload_id, "rows_sent": len(records), **result,
            "state": state.to_dict() if state else None}

@router.delete("/{upload_id}")
def clear_upload(upload_id: str, store: IngestSessions = Depends(get_sessions)):
    _require(store, upload_id)
    state = store.dispatch(upload_id, Cleared())
    store.drop(upload_id)
    return {"upload_id": upload_id, "cleared": True, "generation": state.generation}
