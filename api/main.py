"""
FastAPI application hosting the Farm2Home functions.

This application provides:
1. The callable protocol (/functions/{name}) for request/response functions
2. Document endpoints (/data/...) that read and write the store; creating
   users/{userId} or orders/{orderId} fires the matching trigger
3. Manual runs of scheduled functions (/scheduled/{name})

Run with:
    uv run uvicorn api.main:app --reload

Then visit http://localhost:8000/docs for interactive API documentation.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import Body, Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from functions import Functions, build_functions, log_catalog
from shared.config import get_settings
from shared.document_store import DocumentSnapshot, InvalidPathError, is_document_path
from shared.errors import HTTP_STATUS, FunctionError, InvalidArgumentError, NotFoundError

logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s | %(name)-24s | %(levelname)-5s | %(message)s",
    datefmt="%H:%M:%S",
)

logger = logging.getLogger("api")

# Module-level instance, built once at startup (tests swap it with reset_app_state)
_functions: Optional[Functions] = None


def get_functions() -> Functions:
    """Get the wired functions."""
    if _functions is None:
        raise RuntimeError("Functions are not initialized; the app has not started")
    return _functions


def reset_app_state(functions: Optional[Functions] = None) -> None:
    """Replace the wired functions (for testing)."""
    global _functions
    _functions = functions


class CallableRequest(BaseModel):
    """Body of a callable invocation: ``{"data": {...}}``."""
    data: Any = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown."""
    global _functions
    if _functions is None:
        _functions = build_functions()
    log_catalog(_functions)
    yield
    logging.info("Shutting down")


app = FastAPI(
    title="Farm2Home Functions",
    description="""
    Backend functions for the Farm2Home grocery-delivery app.

    ## Endpoints

    - `/functions/{name}` - Call a request/response function with `{"data": {...}}`
    - `/data/{path}` - Read and write documents; new users and orders fire triggers
    - `/scheduled/{name}` - Run a scheduled function now
    """,
    version="1.0.0",
    lifespan=lifespan,
)


# =============================================================================
# Error Handlers
# =============================================================================

@app.exception_handler(FunctionError)
async def function_error_handler(request: Request, exc: FunctionError):
    """Map function errors to the callable error envelope."""
    logger.warning(f"{exc.status} on {request.url.path}: {exc.message}")
    return JSONResponse(status_code=HTTP_STATUS.get(exc.code, 500), content=exc.to_response())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Map malformed request bodies to invalid-argument."""
    logger.warning(f"Validation error on {request.url.path}: {exc.errors()}")
    error = InvalidArgumentError("Request body must be a JSON object")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=error.to_response())


@app.exception_handler(Exception)
async def generic_error_handler(request: Request, exc: Exception):
    """Catch-all; never leaks internal details."""
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"error": {"status": "INTERNAL", "code": "internal", "message": "Internal error"}},
    )


# =============================================================================
# Health and catalog
# =============================================================================

@app.get("/health", tags=["Health"])
def health_check(functions: Functions = Depends(get_functions)):
    """Health check endpoint."""
    return {"status": "healthy", "service": functions.settings.app_name}


@app.get("/functions", tags=["Functions"])
def list_functions(functions: Functions = Depends(get_functions)):
    """List callable functions, triggers and schedules."""
    return functions.describe()


# =============================================================================
# Callable functions
# =============================================================================

@app.post("/functions/{name}", tags=["Functions"])
def call_function(
    name: str,
    request: CallableRequest,
    functions: Functions = Depends(get_functions),
):
    """
    Call a request/response function.

    Success returns ``{"result": {...}}``. Failures return
    ``{"error": {"status", "code", "message"}}`` with HTTP 400 for
    invalid arguments, 404 for unknown functions and 500 otherwise.
    """
    response = functions.call(name, request.data)
    return {"result": response.to_result()}


# =============================================================================
# Scheduled functions
# =============================================================================

@app.post("/scheduled/{name}", tags=["Scheduled"])
def run_scheduled(name: str, functions: Functions = Depends(get_functions)):
    """Run a scheduled function immediately."""
    if functions.scheduler.get(name) is None:
        raise NotFoundError(f"Scheduled function not found: {name}")
    return functions.scheduler.run(name).to_result()


# =============================================================================
# Documents (for exploration and for firing triggers)
# =============================================================================

def _snapshot_json(snapshot: DocumentSnapshot) -> dict[str, Any]:
    return {"id": snapshot.id, "path": snapshot.path, "data": snapshot.data}


@app.get("/data/{path:path}", tags=["Data"])
def read_data(path: str, functions: Functions = Depends(get_functions)):
    """Read a document, or every document of a collection."""
    try:
        if is_document_path(path):
            snapshot = functions.store.get(path)
            if not snapshot.exists:
                raise NotFoundError(f"Document not found: {path}")
            return _snapshot_json(snapshot)
        return [_snapshot_json(s) for s in functions.store.list_documents(path)]
    except InvalidPathError as e:
        raise InvalidArgumentError(str(e)) from e


@app.put("/data/{path:path}", tags=["Data"])
def write_document(
    path: str,
    data: dict[str, Any] = Body(...),
    functions: Functions = Depends(get_functions),
):
    """Create or overwrite a document. A new document fires matching triggers."""
    try:
        return _snapshot_json(functions.store.set(path, data))
    except InvalidPathError as e:
        raise InvalidArgumentError(str(e)) from e


@app.post("/data/{path:path}", tags=["Data"])
def add_document(
    path: str,
    data: dict[str, Any] = Body(...),
    functions: Functions = Depends(get_functions),
):
    """Add a document with an auto-generated id to a collection."""
    try:
        return _snapshot_json(functions.store.add(path, data))
    except InvalidPathError as e:
        raise InvalidArgumentError(str(e)) from e
