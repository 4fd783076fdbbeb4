from contextlib import contextmanager
from typing import Any, Iterator, List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Request, Response, status
from starlette.concurrency import run_in_threadpool

from ..core.errors import (
    MalformedIdentifier,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from ..core.schemas import WordForm, WordOut, WordUpdate, validate_payload
from ..core.storage import DatabaseStorage, get_storage

router = APIRouter(prefix="/api/words", tags=["words"])


# ---------- Helpers ----------


MAX_ID = 2**63 - 1


def parse_word_id(raw: str) -> int:
    """Plain base-10 integer within the 64-bit id range, else MalformedIdentifier."""
    text = raw.strip()
    digits = text.lstrip("+-")
    if not (digits.isascii() and digits.isdigit()):
        raise MalformedIdentifier(raw)
    try:
        value = int(text)
    except ValueError:
        raise MalformedIdentifier(raw)
    if abs(value) > MAX_ID:
        raise MalformedIdentifier(raw)
    return value


async def read_json_body(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError:
        raise ValidationError({"body": "Request body is not valid JSON"})


@contextmanager
def failure_message(message: str) -> Iterator[None]:
    """Turn store failures into a 500 that only carries ``message``."""
    try:
        yield
    except PersistenceError as exc:
        raise HTTPException(status_code=500, detail=message) from exc


# ---------- Endpoints ----------


@router.get("", response_model=List[WordOut])
def list_words(
    search: Optional[str] = Query(None, description="Substring of word, definition or example"),
    tag: Optional[str] = Query(None, description="Exact tag to filter by"),
    storage: DatabaseStorage = Depends(get_storage),
):
    with failure_message("Failed to fetch words"):
        if search:
            return storage.search_words(search)
        if tag:
            return storage.filter_words_by_tag(tag)
        return storage.get_all_words()


@router.get("/{word_id}", response_model=WordOut)
def get_word(word_id: str, storage: DatabaseStorage = Depends(get_storage)):
    wid = parse_word_id(word_id)

    with failure_message("Failed to fetch word"):
        w = storage.get_word(wid)
    if not w:
        raise NotFoundError("Word")
    return w


@router.post("", response_model=WordOut, status_code=status.HTTP_201_CREATED)
def create_word(payload: Any = Body(None), storage: DatabaseStorage = Depends(get_storage)):
    data = validate_payload(WordForm, payload)

    with failure_message("Failed to create word"):
        return storage.create_word(data)


@router.put("/{word_id}", response_model=WordOut)
async def update_word(
    word_id: str,
    request: Request,
    storage: DatabaseStorage = Depends(get_storage),
):
    wid = parse_word_id(word_id)

    with failure_message("Failed to update word"):
        if not await run_in_threadpool(storage.get_word, wid):
            raise NotFoundError("Word")

        # Body is read only once the word is known to exist
        patch = validate_payload(WordUpdate, await read_json_body(request))
        w = await run_in_threadpool(storage.update_word, wid, patch)

    # Deleted between the existence check and the update
    if not w:
        raise NotFoundError("Word")
    return w


@router.delete("/{word_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_word(word_id: str, storage: DatabaseStorage = Depends(get_storage)):
    wid = parse_word_id(word_id)

    with failure_message("Failed to delete word"):
        if not storage.get_word(wid):
            raise NotFoundError("Word")

        if not storage.delete_word(wid):
            raise HTTPException(status_code=500, detail="Failed to delete word")

    return Response(status_code=status.HTTP_204_NO_CONTENT)
