"""Lending FastAPI application.

Processes commands synchronously via HTTP inside the lending domain context.

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV controls which config overlay is applied:
#   - "test"       → event_processing = "sync"  (projectors fire in UoW)
#   - "production" → event_processing = "async" (projectors fire via Engine)
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from lending.domain import lending  # noqa: E402
from lending.utils.logging import bind_request_context, clear_request_context  # noqa: E402

lending.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Lending API",
    description="Equipment lending — order intake, allocation and cancellation",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the lending domain context for each request."""
    if request.url.path.startswith(("/orders", "/items")):
        bind_request_context(method=request.method, path=request.url.path)
        try:
            with lending.domain_context():
                return await call_next(request)
        finally:
            clear_request_context()
    # Health check, docs, etc.
    return await call_next(request)


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from lending.api import item_router, order_router, register_lending_exception_handlers  # noqa: E402

app.include_router(order_router)
app.include_router(item_router)
register_lending_exception_handlers(app)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": lending.name})
