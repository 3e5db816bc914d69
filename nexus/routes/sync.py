"""
Document sync, export and reset routes.
"""
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from nexus.database import get_db
from nexus.dependencies import verify_api_key, get_today
from nexus.schemas import SyncDocument, SyncPayload
from nexus.services.sync_service import SyncService
from nexus.exceptions import DatabaseException, SyncException

router = APIRouter(prefix="/api", tags=["sync"], dependencies=[Depends(verify_api_key)])


@router.get("/sync", response_model=SyncDocument, response_model_by_alias=True)
def get_document(db: Session = Depends(get_db)):
    """Whole user state for a device to pull"""
    return SyncService(db).export_document()


@router.put("/sync", response_model=SyncDocument, response_model_by_alias=True)
def put_document(payload: SyncPayload, db: Session = Depends(get_db)):
    """Replace every section present in the payload"""
    try:
        return SyncService(db).import_document(payload)
    except SyncException as e:
        raise HTTPException(status_code=422, detail=str(e))
    except DatabaseException as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/export")
def export_data(db: Session = Depends(get_db), today=Depends(get_today)):
    """Sync document as a downloadable JSON file"""
    document = SyncService(db).export_document()
    filename = f"nexus-backup-{today.isoformat()}.json"
    return JSONResponse(
        content=document.model_dump(mode="json", by_alias=True),
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/reset")
def reset_data(db: Session = Depends(get_db)):
    """Delete all habits and journal entries and restore default settings"""
    SyncService(db).reset()
    return {"message": "All data reset"}
