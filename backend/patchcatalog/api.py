from fastapi import APIRouter, Depends, HTTPException, Query, Request
from typing import List, Optional
import logging

from .database import CatalogDB
from .editor import MetadataEditor
from .export import export_patches
from .filters import facet_values, filter_patches
from .ingest import import_patches_from_directory
from .models import (
    BankResponse, ExportRequest, ExportResponse, FacetsResponse, ImportRequest,
    PatchFilter, PatchResponse, PatchUpdate, StatsResponse, UpdateResponse
)

# Setup logging
logger = logging.getLogger(__name__)

catalog_router = APIRouter(prefix="/api/catalog")


def get_db(request: Request) -> CatalogDB:
    """The store handle opened by the application lifespan."""
    return request.app.state.catalog_db


@catalog_router.get("/patches", response_model=List[PatchResponse])
async def list_patches(
    loved: bool = Query(False, description="Only loved patches"),
    custom: bool = Query(False, description="Only patches from user banks"),
    category: Optional[str] = Query(None),
    tag: Optional[str] = Query(None),
    bank: Optional[str] = Query(None),
    library: Optional[str] = Query(None),
    db: CatalogDB = Depends(get_db)
):
    patch_filter = PatchFilter(
        loved=loved, custom=custom, category=category,
        tag=tag, bank=bank, library=library
    )
    patches = filter_patches(db.load_patches(), patch_filter)
    return [PatchResponse.from_patch(p) for p in patches]


@catalog_router.get("/facets", response_model=FacetsResponse)
async def list_facets(db: CatalogDB = Depends(get_db)):
    """Choices for the patch filters, taken from the stored patches."""
    return FacetsResponse(**facet_values(db.load_patches()))


@catalog_router.patch("/patches", response_model=UpdateResponse)
async def update_patch(
    updates: PatchUpdate,
    path: str = Query(..., description="Path of the patch to edit"),
    db: CatalogDB = Depends(get_db)
):
    updated = MetadataEditor(db).update(path, updates)
    return UpdateResponse(updated=updated)


@catalog_router.get("/banks", response_model=List[BankResponse])
async def list_banks(db: CatalogDB = Depends(get_db)):
    return [BankResponse.from_bank(b) for b in db.load_banks()]


@catalog_router.get("/banks/{bank_id}/patches", response_model=List[PatchResponse])
async def get_patches_for_bank(bank_id: int, db: CatalogDB = Depends(get_db)):
    return [PatchResponse.from_patch(p) for p in db.get_patches_for_bank(bank_id)]


@catalog_router.post("/import", response_model=List[PatchResponse])
async def import_patches(request: ImportRequest, db: CatalogDB = Depends(get_db)):
    """
    Import patches from a directory on the server's filesystem.

    An empty ``root_dir`` means no directory was chosen and imports nothing.
    """
    try:
        patches = await import_patches_from_directory(request.root_dir, request.library, db)
    except FileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Import error: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Import failed: {str(e)}")

    logger.info(f"Imported {len(patches)} patches from {request.root_dir}")
    return [PatchResponse.from_patch(p) for p in patches]


@catalog_router.post("/export", response_model=ExportResponse)
async def export_selected(request: ExportRequest):
    try:
        written = export_patches(request.paths, request.destination)
    except FileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Export error: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Export failed: {str(e)}")
    return ExportResponse(files=[str(p) for p in written])


@catalog_router.get("/stats", response_model=StatsResponse)
async def get_stats(db: CatalogDB = Depends(get_db)):
    return StatsResponse(**db.get_statistics())
