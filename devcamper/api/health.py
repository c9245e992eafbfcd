"""Health check endpoint."""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from devcamper.database import health_check

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health() -> JSONResponse:
    """Report database connectivity."""
    database_ok = await health_check()
    return JSONResponse(
        status_code=200 if database_ok else 503,
        content={
            "success": database_ok,
            "data": {"database": "ok" if database_ok else "unavailable"},
        },
    )
