"""
JSON-RPC 2.0 dispatch for the MCP methods this server implements.

Transport-agnostic: both the Streamable HTTP and the legacy SSE transports
hand each parsed request to process_jsonrpc_request() and ship back the
returned dict.
"""

import logging
from typing import TYPE_CHECKING, Any, Dict, Optional

if TYPE_CHECKING:
    from summary_server.services.summary_server import SummaryInstructionsServer

logger = logging.getLogger(__name__)

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603
# Server-defined: session or resource missing at the transport level
SESSION_NOT_FOUND = -32001

SUPPORTED_PROTOCOL_VERSIONS = ["2025-06-18", "2025-03-26", "2024-11-05"]
DEFAULT_PROTOCOL_VERSION = "2025-06-18"

SERVER_INSTRUCTIONS = (
    "Call generate-system-summary-instructions (or read instructions://system-summary) to get the "
    "JSON contract for codebase_summary.md, inspect the codebase, then write the summary."
)


class McpError(Exception):
    """An error that maps directly onto a JSON-RPC error object."""

    def __init__(self, code: int, message: str, data: Any = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data


def jsonrpc_error(msg_id: Any, code: int, message: str, data: Any = None) -> Dict[str, Any]:
    error: Dict[str, Any] = {"code": code, "message": message}
    if data is not None:
        error["data"] = data
    return {
        "jsonrpc": "2.0",
        "id": msg_id,
        "error": error,
    }


def jsonrpc_result(msg_id: Any, result: Dict[str, Any]) -> Dict[str, Any]:
    return {"jsonrpc": "2.0", "id": msg_id, "result": result}


def negotiate_protocol_version(requested: Optional[str]) -> str:
    # Per MCP lifecycle: echo a supported version, otherwise offer our latest
    if requested in SUPPORTED_PROTOCOL_VERSIONS:
        return requested
    return DEFAULT_PROTOCOL_VERSION


def _require_param(params: Dict[str, Any], key: str) -> Any:
    value = params.get(key)
    if not isinstance(value, str) or not value:
        raise McpError(INVALID_PARAMS, f"Missing or invalid '{key}' parameter")
    return value


def _dispatch(
    server: "SummaryInstructionsServer",
    method: Optional[str],
    params: Dict[str, Any],
    session_id: Optional[str],
    protocol_version: str,
) -> Dict[str, Any]:
    if method == "initialize":
        result: Dict[str, Any] = {
            "protocolVersion": negotiate_protocol_version(params.get("protocolVersion") or protocol_version),
            "capabilities": {
                "tools": {"listChanged": False},
                "resources": {"subscribe": False, "listChanged": False},
                "prompts": {"listChanged": False},
                "logging": {},
            },
            "serverInfo": {
                "name": server.server_name,
                "version": server.server_version,
            },
            "instructions": SERVER_INSTRUCTIONS,
        }
        if session_id:
            result["_meta"] = {"sessionId": session_id}
        return result

    if method == "ping":
        return {}

    if method == "tools/list":
        return {"tools": server.list_tools()}

    if method == "tools/call":
        name = _require_param(params, "name")
        return server.call_tool(name, params.get("arguments"))

    if method == "resources/list":
        return {"resources": server.list_resources()}

    if method == "resources/templates/list":
        return {"resourceTemplates": server.list_resource_templates()}

    if method == "resources/read":
        uri = _require_param(params, "uri")
        return server.read_resource(uri)

    if method == "prompts/list":
        return {"prompts": server.list_prompts()}

    if method == "prompts/get":
        name = _require_param(params, "name")
        return server.get_prompt(name, params.get("arguments"))

    if method == "logging/setLevel":
        # Accepted for client compatibility; server log level comes from settings
        logger.info("Client requested log level %s", params.get("level"))
        return {}

    raise McpError(METHOD_NOT_FOUND, f"Method not found: {method}")


def process_jsonrpc_request(
    server: "SummaryInstructionsServer",
    message: Dict[str, Any],
    session_id: Optional[str] = None,
    protocol_version: str = DEFAULT_PROTOCOL_VERSION,
) -> Dict[str, Any]:
    """
    Process a JSON-RPC request and return the response envelope.

    Never raises: McpError becomes its own error object, anything else is
    logged and reported as an internal error.
    """
    method = message.get("method")
    msg_id = message.get("id")
    params = message.get("params") or {}

    if not isinstance(method, str):
        return jsonrpc_error(msg_id, INVALID_REQUEST, "Invalid Request: 'method' must be a string")
    if not isinstance(params, dict):
        return jsonrpc_error(msg_id, INVALID_PARAMS, "Invalid params: expected an object")

    try:
        result = _dispatch(server, method, params, session_id, protocol_version)
    except McpError as e:
        if e.code == METHOD_NOT_FOUND:
            logger.warning("Unknown method '%s'", method)
        return jsonrpc_error(msg_id, e.code, e.message, e.data)
    except Exception as e:
        logger.error("Error handling '%s': %s", method, e, exc_info=True)
        return jsonrpc_error(msg_id, INTERNAL_ERROR, f"Internal error: {str(e)}")

    return jsonrpc_result(msg_id, result)


def is_request(message: Dict[str, Any]) -> bool:
    """Requests carry both an id and a method; everything else expects no reply."""
    return "id" in message and message.get("id") is not None and "method" in message
