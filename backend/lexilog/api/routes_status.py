from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from ..core.storage import DatabaseStorage, get_storage
from .routes_tags import collect_tags
from .routes_words import failure_message

router = APIRouter(prefix="/api", tags=["status"])


class StatusResponse(BaseModel):
    app: str
    environment: str
    version: str
    words: int
    tags: int


@router.get("/status", response_model=StatusResponse)
def get_status(request: Request, storage: DatabaseStorage = Depends(get_storage)):
    settings = request.app.state.settings

    with failure_message("Failed to fetch status"):
        words = storage.get_all_words()

    return StatusResponse(
        app=settings.app_name,
        environment=settings.environment,
        version=settings.version,
        words=len(words),
        tags=len(collect_tags(words)),
    )
