from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from smart_inventory.db.boltic import BolticClient
from smart_inventory.db.session import get_boltic_client
from smart_inventory.exceptions import EmptyInputError, NetworkError
from smart_inventory.manual_entry import ManualEntry, submit_manual_entries

router = APIRouter()

class ManualEntryRequest(BaseModel):
    entries: list[ManualEntry]

@router.post("")
async def submit_entries(
    body: ManualEntryRequest,
    client: BolticClient = Depends(get_boltic_client),
):
    try:
        return await submit_manual_entries(client, body.entries)
    except EmptyInputError as e:
        raise HTTPException(status_code=422, detail=e.message)
    except NetworkError as e:
        raise HTTPException(status_code=502, detail=f"Failed to send data: {e.message}")
