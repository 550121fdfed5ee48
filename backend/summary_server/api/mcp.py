from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse
from sse_starlette.sse import EventSourceResponse
import asyncio
import json
import logging
import uuid
from typing import Any, Dict, Optional
from summary_server.core.config import InvalidServerConfig, resolve_server_config, settings
from summary_server.services.jsonrpc import (
    INVALID_PARAMS,
    INVALID_REQUEST,
    PARSE_ERROR,
    SESSION_NOT_FOUND,
    is_request,
    jsonrpc_error,
    process_jsonrpc_request,
)
from summary_server.services.summary_server import SummaryInstructionsServer

router = APIRouter()
logger = logging.getLogger(__name__)


class LegacySession:
    """
    One HTTP+SSE (2024-11-05) session.

    Responses to POSTed requests are queued here and drained by the
    session's SSE stream.
    """

    def __init__(self, server: SummaryInstructionsServer):
        self.server = server
        self.outbox: asyncio.Queue = asyncio.Queue()


legacy_sessions: Dict[str, LegacySession] = {}


def _sse_event_stream(session_id: str, messages_url: str, keepalive: float):
    session = legacy_sessions[session_id]

    async def event_generator():
        # 1. Send the 'endpoint' event pointing to the POST messages URL
        logger.info(f"Sending endpoint event: {messages_url}")
        yield {
            "event": "endpoint",
            "data": messages_url
        }

        # 2. Relay queued responses; comment lines keep proxies from timing out
        try:
            while True:
                try:
                    message = await asyncio.wait_for(session.outbox.get(), timeout=keepalive)
                except asyncio.TimeoutError:
                    yield {
                        "comment": "keep-alive"
                    }
                    continue
                yield {
                    "event": "message",
                    "data": json.dumps(message)
                }
        except asyncio.CancelledError:
            logger.info(f"SSE connection closed for session {session_id}")
            raise
        finally:
            legacy_sessions.pop(session_id, None)

    return event_generator()


@router.get("/sse")
async def handle_sse(request: Request):
    """
    Handle MCP SSE connection.

    This endpoint establishes a Server-Sent Events (SSE) connection for the MCP protocol.
    It first sends an 'endpoint' event with the URL for JSON-RPC message submission,
    then streams responses as 'message' events, with periodic keep-alive comments.
    """
    try:
        config = resolve_server_config(request.query_params, settings.default_server_config())
    except InvalidServerConfig as e:
        return JSONResponse(
            status_code=400,
            content=jsonrpc_error(None, INVALID_PARAMS, str(e), e.errors or None),
        )

    session_id = uuid.uuid4().hex
    legacy_sessions[session_id] = LegacySession(SummaryInstructionsServer(config))
    logger.info(f"New SSE connection, session {session_id}")

    # Use PUBLIC_URL if configured (for ngrok), otherwise fall back to request.base_url
    base_url = settings.PUBLIC_URL.rstrip("/") if settings.PUBLIC_URL else str(request.base_url).rstrip("/")
    messages_url = f"{base_url}/messages?session_id={session_id}"

    return EventSourceResponse(
        _sse_event_stream(session_id, messages_url, settings.SSE_KEEPALIVE_SECONDS)
    )


@router.post("/messages")
async def handle_messages(request: Request, session_id: Optional[str] = None):
    """
    Handle MCP JSON-RPC messages for a legacy SSE session.

    Per JSON-RPC 2.0 spec:
    - Requests have an 'id' field; their response is delivered on the SSE stream
    - Notifications have NO 'id' field and expect NO response
    Either way the POST itself is acknowledged with 202.
    """
    session = legacy_sessions.get(session_id) if session_id else None
    if session is None:
        return JSONResponse(
            status_code=404,
            content=jsonrpc_error(None, SESSION_NOT_FOUND, f"Session not found: {session_id}"),
        )

    try:
        body: Any = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.error(f"Invalid JSON in request: {e}")
        return JSONResponse(status_code=400, content=jsonrpc_error(None, PARSE_ERROR, "Parse error: Invalid JSON"))

    if not isinstance(body, dict):
        return JSONResponse(
            status_code=400,
            content=jsonrpc_error(None, INVALID_REQUEST, "Invalid Request: expected a single JSON-RPC object"),
        )

    logger.info(f"Received message for session {session_id}: {body.get('method')}")

    if is_request(body):
        response = process_jsonrpc_request(session.server, body, session_id, "2024-11-05")
        await session.outbox.put(response)
    else:
        logger.info(f"Received notification '{body.get('method')}' for session {session_id}")

    return Response(status_code=202)
