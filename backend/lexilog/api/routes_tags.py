from typing import List

from fastapi import APIRouter, Depends

from ..core.storage import DatabaseStorage, get_storage
from .routes_words import failure_message

router = APIRouter(prefix="/api/tags", tags=["tags"])


def collect_tags(words) -> List[str]:
    """Distinct tags in first-seen order."""
    seen = {}
    for w in words:
        for tag in w.tags or []:
            seen.setdefault(tag, None)
    return list(seen)


@router.get("", response_model=List[str])
def list_tags(storage: DatabaseStorage = Depends(get_storage)):
    with failure_message("Failed to fetch tags"):
        words = storage.get_all_words()
    return collect_tags(words)
