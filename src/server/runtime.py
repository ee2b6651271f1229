from fastapi import HTTPException, Request

from src.core.bootstrap import SearchRuntime


def get_runtime(request: Request) -> SearchRuntime:
    runtime = getattr(request.app.state, "runtime", None)
    if runtime is None:
        raise HTTPException(status_code=503, detail="Search runtime is not ready")
    return runtime
