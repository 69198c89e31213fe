"""Health check endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status

from wellness.config import settings
from wellness.database import Database, get_database
from wellness.shared.schemas import OkResponse

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=OkResponse[dict])
async def health_check(database: Database = Depends(get_database)):
    """Health check endpoint. Fails with 503 when MongoDB does not answer a ping."""
    if not await database.ping():
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database unavailable",
        )

    return OkResponse(value={
        "status": "healthy",
        "service": settings.APP_NAME,
        "database": database.name,
    })
