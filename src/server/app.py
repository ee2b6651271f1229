from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.contracts.resource_v1 import ErrorResponse
from src.core.bootstrap import SearchRuntime, build_runtime
from src.server.routers.search import router as search_router
from src.server.routers.tags import router as tags_router


def _first_validation_message(exc: RequestValidationError) -> str:
    for err in exc.errors():
        msg = str(err.get("msg") or "Invalid request")
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        return f"{'.'.join(loc)}: {msg}" if loc else msg
    return "Invalid request"


def create_app(runtime: SearchRuntime | None = None) -> FastAPI:
    """Build the API. A prebuilt runtime is used as-is and not closed on shutdown."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = getattr(app.state, "runtime", None) is None
        if owned:
            app.state.runtime = build_runtime()
        yield
        if owned:
            await app.state.runtime.close()
            app.state.runtime = None

    app = FastAPI(
        title="learning-resource-finder",
        description="Meta-search for learning resources across GitHub, YouTube, Reddit, Internet Archive and freeCodeCamp",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.runtime = runtime

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(error=str(exc.detail)).model_dump(),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content=ErrorResponse(error=_first_validation_message(exc)).model_dump(),
        )

    app.include_router(search_router)
    app.include_router(tags_router)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app
