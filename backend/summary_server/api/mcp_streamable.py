"""
Streamable HTTP transport (MCP 2025-06-18) for the summary instructions server.

One /mcp endpoint: POST carries JSON-RPC messages, GET opens a keep-alive
SSE stream, DELETE ends a session. A session's configuration is fixed by
the query string of its initialize request; requests without a session
header are served statelessly.
"""

from fastapi import APIRouter, Request, Response, Header
from fastapi.responses import JSONResponse
from sse_starlette.sse import EventSourceResponse
import asyncio
import json
import logging
import time
import uuid
from collections import OrderedDict
from typing import Any, Callable, Optional, Tuple
from summary_server.core.config import InvalidServerConfig, resolve_server_config, settings
from summary_server.services.jsonrpc import (
    DEFAULT_PROTOCOL_VERSION,
    INVALID_PARAMS,
    INVALID_REQUEST,
    PARSE_ERROR,
    SESSION_NOT_FOUND,
    SUPPORTED_PROTOCOL_VERSIONS,
    is_request,
    jsonrpc_error,
    process_jsonrpc_request,
)
from summary_server.services.summary_server import SummaryInstructionsServer

router = APIRouter()
logger = logging.getLogger(__name__)


class SessionStore:
    """
    Active sessions keyed by Mcp-Session-Id, least recently used first.

    In-process only. Sessions idle longer than idle_ttl expire, and adding
    past max_sessions evicts the least recently used one, so clients that
    never send DELETE cannot grow the map without bound.
    """

    def __init__(self, max_sessions: int, idle_ttl: float, clock: Callable[[], float] = time.monotonic):
        self.max_sessions = max_sessions
        self.idle_ttl = idle_ttl
        self._clock = clock
        self._sessions: "OrderedDict[str, Tuple[SummaryInstructionsServer, float]]" = OrderedDict()

    def _expire(self) -> None:
        now = self._clock()
        while self._sessions:
            session_id, (_, last_seen) = next(iter(self._sessions.items()))
            if now - last_seen <= self.idle_ttl:
                break
            self._sessions.popitem(last=False)
            logger.info(f"Expired idle MCP session {session_id}")

    def add(self, session_id: str, server: SummaryInstructionsServer) -> None:
        self._expire()
        self._sessions[session_id] = (server, self._clock())
        self._sessions.move_to_end(session_id)
        while len(self._sessions) > self.max_sessions:
            evicted, _ = self._sessions.popitem(last=False)
            logger.warning(f"Session limit {self.max_sessions} reached, evicted MCP session {evicted}")

    def get(self, session_id: str) -> Optional[SummaryInstructionsServer]:
        """Return the session's server and mark it as used, or None."""
        self._expire()
        entry = self._sessions.get(session_id)
        if entry is None:
            return None
        self._sessions[session_id] = (entry[0], self._clock())
        self._sessions.move_to_end(session_id)
        return entry[0]

    def pop(self, session_id: str, default=None):
        entry = self._sessions.pop(session_id, None)
        return default if entry is None else entry[0]

    def clear(self) -> None:
        self._sessions.clear()

    def __getitem__(self, session_id: str) -> SummaryInstructionsServer:
        return self._sessions[session_id][0]

    def __contains__(self, session_id: object) -> bool:
        self._expire()
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)


active_sessions = SessionStore(settings.MAX_SESSIONS, settings.SESSION_IDLE_TTL_SECONDS)


def _error_response(
    status_code: int,
    msg_id: Any,
    code: int,
    message: str,
    protocol_version: str,
    data: Any = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=jsonrpc_error(msg_id, code, message, data),
        headers={"MCP-Protocol-Version": protocol_version},
    )


def create_session(request: Request) -> tuple:
    """
    Create a session whose configuration comes from the request's query string.

    Returns:
        (session_id, server)

    Raises:
        InvalidServerConfig: If the query parameters do not validate.
    """
    config = resolve_server_config(request.query_params, settings.default_server_config())
    session_id = uuid.uuid4().hex
    server = SummaryInstructionsServer(config)
    active_sessions.add(session_id, server)
    logger.info(f"Created MCP session {session_id} (outputDirectory={config.output_directory})")
    return session_id, server


async def keepalive_events(interval: float):
    """
    Yield SSE events for the GET stream.

    This server never initiates messages, so the stream only carries
    keep-alive comments to hold the connection open through proxies.
    """
    yield {"comment": "connection-established"}
    while True:
        await asyncio.sleep(interval)
        yield {"comment": "keep-alive"}


@router.get("/mcp")
@router.post("/mcp")
@router.delete("/mcp")
async def handle_mcp_endpoint(
    request: Request,
    mcp_protocol_version: Optional[str] = Header(None, alias="MCP-Protocol-Version"),
    mcp_session_id: Optional[str] = Header(None, alias="Mcp-Session-Id"),
):
    """
    Unified MCP endpoint.

    POST:   Sends one JSON-RPC request, notification or response
    GET:    Opens an SSE stream for server-initiated messages
    DELETE: Terminates the session named by Mcp-Session-Id

    Session configuration (outputDirectory, includeGitHistory, debug) is read
    from the query string when the session is initialized.
    """
    protocol_version = mcp_protocol_version or DEFAULT_PROTOCOL_VERSION
    if protocol_version not in SUPPORTED_PROTOCOL_VERSIONS:
        logger.warning(f"Unsupported protocol version: {protocol_version}")
        return _error_response(
            400,
            None,
            INVALID_REQUEST,
            f"Unsupported protocol version: {protocol_version}",
            DEFAULT_PROTOCOL_VERSION,
            data={"supported_versions": SUPPORTED_PROTOCOL_VERSIONS},
        )

    logger.info(f"MCP {request.method} request, session {mcp_session_id}, protocol {protocol_version}")

    if request.method == "DELETE":
        return handle_delete_session(mcp_session_id, protocol_version)

    if request.method == "GET":
        return handle_get_sse_stream(mcp_session_id, protocol_version)

    return await handle_post_message(request, mcp_session_id, protocol_version)


def handle_delete_session(session_id: Optional[str], protocol_version: str) -> Response:
    if not session_id or active_sessions.pop(session_id, None) is None:
        return _error_response(
            404, None, SESSION_NOT_FOUND, f"Session not found: {session_id}", protocol_version
        )

    logger.info(f"Terminated MCP session {session_id}")
    return Response(status_code=204, headers={"MCP-Protocol-Version": protocol_version})


def handle_get_sse_stream(session_id: Optional[str], protocol_version: str) -> Response:
    """
    Handle GET request to open SSE stream for server-initiated messages.
    """
    if session_id and session_id not in active_sessions:
        return _error_response(
            404, None, SESSION_NOT_FOUND, f"Session not found: {session_id}", protocol_version
        )

    logger.info(f"Opening SSE stream for session {session_id}")
    return EventSourceResponse(
        keepalive_events(settings.SSE_KEEPALIVE_SECONDS),
        headers={
            "MCP-Protocol-Version": protocol_version,
            "Cache-Control": "no-store",
            "X-Accel-Buffering": "no",
        },
    )


async def handle_post_message(
    request: Request,
    session_id: Optional[str],
    protocol_version: str,
) -> Response:
    """
    Handle POST request to process one JSON-RPC message.

    The server responds with either:
    - 202 Accepted (for notifications/responses)
    - 200 OK with JSON response (for requests)
    """
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.error(f"Invalid JSON in request: {e}")
        return _error_response(400, None, PARSE_ERROR, "Parse error: Invalid JSON", protocol_version)

    if not isinstance(body, dict):
        return _error_response(
            400, None, INVALID_REQUEST, "Invalid Request: expected a single JSON-RPC object", protocol_version
        )

    method = body.get("method")
    msg_id = body.get("id")
    headers = {"MCP-Protocol-Version": protocol_version}

    try:
        if method == "initialize" and is_request(body):
            session_id, server = create_session(request)
            headers["Mcp-Session-Id"] = session_id
        elif session_id:
            server = active_sessions.get(session_id)
            if server is None:
                return _error_response(
                    404, msg_id, SESSION_NOT_FOUND, f"Session not found: {session_id}", protocol_version
                )
        else:
            # Stateless: configuration travels with every request
            config = resolve_server_config(request.query_params, settings.default_server_config())
            server = SummaryInstructionsServer(config)
    except InvalidServerConfig as e:
        return _error_response(400, msg_id, INVALID_PARAMS, str(e), protocol_version, data=e.errors or None)

    # Notifications and client responses get no JSON-RPC reply
    if not is_request(body):
        logger.info(f"Received notification/response '{method}' for session {session_id}")
        return Response(status_code=202, headers=headers)

    response_data = process_jsonrpc_request(server, body, session_id, protocol_version)

    return JSONResponse(
        status_code=200,
        content=response_data,
        headers=headers,
    )
