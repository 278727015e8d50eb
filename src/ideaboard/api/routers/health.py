from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from ideaboard.api import deps
from ideaboard.core.config import get_settings
from ideaboard.core.modelhub import get_modelhub_client
from ideaboard.services.health import check_db

router = APIRouter(prefix="/health", tags=["health"])

@router.get("/liveness")
async def liveness():
    """Verify whether the API is ready to receive traffic."""
    return {"status": "ok"}

@router.get("/readiness")
async def readiness(session: AsyncSession = Depends(deps.get_db)):
    """Verify whether the API is ready to process traffic.

    Generation is optional: without a provider key the idea routes still
    work, only ``/ideas/generate`` answers 503.
    """
    generation = "configured" if get_modelhub_client() is not None else "unconfigured"
    model = get_settings().chat_completion_model
    if await check_db(session):
        return {"status": "ready", "generation": generation, "model": model}
    return {"status": "degraded", "generation": generation, "model": model}
