from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field

from src.server.runtime import get_runtime

router = APIRouter(prefix="/api/tags", tags=["tags"])


class AddTagRequest(BaseModel):
    tag: str = Field(..., min_length=1, max_length=50)


@router.get("/{resource_id}")
async def get_tags(request: Request, resource_id: str):
    store = get_runtime(request).tag_store
    return store.get_tags(resource_id).to_payload()


@router.post("/{resource_id}")
async def add_tag(request: Request, resource_id: str, body: AddTagRequest):
    store = get_runtime(request).tag_store
    try:
        tags = store.add_tag(resource_id, body.tag)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from None
    return tags.to_payload()


@router.delete("/{resource_id}/{tag}")
async def remove_tag(request: Request, resource_id: str, tag: str):
    store = get_runtime(request).tag_store
    return store.remove_tag(resource_id, tag).to_payload()
