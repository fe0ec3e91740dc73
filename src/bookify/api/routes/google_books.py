"""Admin access to the Google Books import adapter."""

import logging

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse

from bookify.api.deps import get_current_admin, get_google_books_client
from bookify.clients.google_books import MAX_RESULTS_LIMIT, GoogleBooksClient
from bookify.schemas.google_books import CoverDownloadRequest, CoverDownloadResponse, GoogleBooksSearchResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/google-books", tags=["Google Books"], dependencies=[Depends(get_current_admin)])


@router.get("/search", response_model=GoogleBooksSearchResponse)
async def search(
    query: str = Query(..., min_length=2),
    max_results: int = Query(10, ge=1, le=MAX_RESULTS_LIMIT),
    client: GoogleBooksClient = Depends(get_google_books_client),
):
    results = await client.search(query, max_results)
    return {"success": True, "count": len(results), "results": results}


@router.post("/download-cover", response_model=CoverDownloadResponse)
async def download_cover(
    payload: CoverDownloadRequest,
    client: GoogleBooksClient = Depends(get_google_books_client),
):
    filename = await client.fetch_and_store(str(payload.url))
    if filename is None:
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"success": False, "filename": None, "url": None, "message": "Failed to download cover image"},
        )
    return {"success": True, "filename": filename, "url": f"/storage/{filename}", "message": "Cover downloaded"}
