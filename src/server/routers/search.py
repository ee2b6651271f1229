from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse

from src.contracts.resource_v1 import ErrorResponse, PlatformFilter, SearchRequest
from src.core.logger import logger
from src.server.runtime import get_runtime

router = APIRouter(prefix="/api", tags=["search"])


def _parse_platform(value: str | None) -> PlatformFilter:
    raw = (value or PlatformFilter.ALL).strip().lower()
    try:
        return PlatformFilter(raw)
    except ValueError:
        allowed = ", ".join(p.value for p in PlatformFilter)
        raise HTTPException(
            status_code=400, detail=f"Invalid platform '{value}'. Expected one of: {allowed}"
        ) from None


async def _run_search(request: Request, query: str, platform: PlatformFilter) -> JSONResponse:
    runtime = get_runtime(request)
    try:
        response = await runtime.orchestrator.search(query, platform)
    except Exception as e:
        logger.error("Search request failed", exception=e)
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error="Internal server error").model_dump(),
        )
    return JSONResponse(content=response.to_payload())


@router.get("/search")
async def search_get(request: Request, query: str | None = None, platform: str | None = None):
    if not query or not query.strip():
        raise HTTPException(status_code=400, detail="Query is required")
    return await _run_search(request, query.strip(), _parse_platform(platform))


@router.post("/search")
async def search_post(request: Request, body: SearchRequest):
    return await _run_search(request, body.query, body.platform)
