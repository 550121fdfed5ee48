from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from summary_server.api import health, mcp, mcp_streamable
from summary_server.core.config import settings
import logging

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle startup and shutdown events."""
    # Startup
    logger.info(f"{settings.SERVER_NAME} {settings.SERVER_VERSION} starting up...")
    yield
    # Shutdown
    logger.info(
        "Shutting down, dropping %d streamable and %d SSE sessions",
        len(mcp_streamable.active_sessions),
        len(mcp.legacy_sessions),
    )
    mcp_streamable.active_sessions.clear()
    mcp.legacy_sessions.clear()

app = FastAPI(
    title=settings.PROJECT_NAME,
    description="MCP server returning instructions for generating codebase_summary.md",
    version=settings.SERVER_VERSION,
    lifespan=lifespan
)

# Add validation error handler to log 422 errors
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.error(f"[VALIDATION ERROR] on {request.url}: {exc.errors()}")
    return JSONResponse(
        status_code=422,
        content={"detail": exc.errors()},
    )

# MCP clients connect from arbitrary origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Mcp-Session-Id", "MCP-Protocol-Version"],
)

app.include_router(health.router, prefix=f"{settings.API_V1_STR}/health", tags=["health"])

# MCP Streamable HTTP transport (spec 2025-06-18) - single unified endpoint
app.include_router(mcp_streamable.router, tags=["mcp-streamable"])

# Legacy MCP SSE transport (deprecated 2024-11-05) - for backwards compatibility
app.include_router(mcp.router, tags=["mcp-legacy"])
