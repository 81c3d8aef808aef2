"""Health, readiness, and version endpoints."""

from fastapi import APIRouter, Depends

from academy.config import get_settings
from academy.dependencies import get_document_store
from academy.redis_client import get_redis
from academy.store.base import DocumentStore

router = APIRouter()


@router.get("/health")
async def health() -> dict[str, str]:
    """Liveness probe: returns 200 if the process is alive."""
    return {"status": "healthy"}


@router.get("/ready")
async def readiness(store: DocumentStore = Depends(get_document_store)) -> dict[str, object]:
    """Readiness probe: checks the document store and Redis."""
    checks: dict[str, object] = {}

    try:
        await store.ping()
        checks["document_store"] = "ok"
    except Exception as exc:
        checks["document_store"] = f"error: {exc}"

    try:
        redis = get_redis()
        await redis.ping()
        checks["redis"] = "ok"
    except Exception as exc:
        checks["redis"] = f"error: {exc}"

    all_ok = all(v == "ok" for v in checks.values())
    return {"status": "ready" if all_ok else "degraded", "checks": checks}


@router.get("/version")
async def version() -> dict[str, str]:
    """Return API version and environment."""
    settings = get_settings()
    return {
        "version": settings.app_version,
        "environment": settings.environment,
    }
