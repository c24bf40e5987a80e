"""
Response envelopes and error handling for the NHL MCP Server.

Every tool returns the same envelope shape:

    success: {"structuredContent": {...}, "summaryText": "...", "isError": False}
    text:    {"summaryText": "...", "isError": False}
    error:   {"summaryText": "Error: ...", "isError": True, "errorType": "..."}

An optional opaque "meta" mapping may ride along on success. Callers branch on
``isError`` only; the summary text is for humans and models.
"""

import logging
import httpx
from functools import wraps
from typing import Any, Callable, Dict, Optional

from fastmcp.exceptions import ToolError
from fastmcp.tools.tool import ToolResult
from mcp.types import TextContent


logger = logging.getLogger(__name__)

ERROR_MARKER = "Error: "


class ErrorType:
    """Standard error type constants."""
    VALIDATION = "validation_error"
    TIMEOUT = "timeout_error"
    HTTP = "http_error"
    NETWORK = "network_error"
    UNEXPECTED = "unexpected_error"


class UpstreamError(Exception):
    """Raised when the statistics service answers with a non-success status."""

    def __init__(self, message: str, status_code: Optional[int] = None, url: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.url = url


def create_success_response(
    structured: Dict[str, Any],
    summary_text: str,
    meta: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """
    Create a success envelope around a structured domain object.

    Args:
        structured: The domain object handed to the presentation layer
        summary_text: Short line derived from ``structured``
        meta: Opaque data passed through untouched

    Returns:
        Envelope dictionary
    """
    response = {
        "structuredContent": structured,
        "summaryText": summary_text,
        "isError": False,
    }
    if meta is not None:
        response["meta"] = meta
    return response


def create_text_response(summary_text: str) -> Dict[str, Any]:
    """Create a summary-only success envelope (no structured content)."""
    return {
        "summaryText": summary_text,
        "isError": False,
    }


def create_error_response(
    error_message: str,
    error_type: str = ErrorType.UNEXPECTED
) -> Dict[str, Any]:
    """
    Create an error envelope.

    Args:
        error_message: Human-readable failure description
        error_type: Type of error (see ErrorType constants)

    Returns:
        Envelope dictionary whose summary starts with ERROR_MARKER
    """
    logger.error(f"Error ({error_type}): {error_message}")
    return {
        "summaryText": f"{ERROR_MARKER}{error_message}",
        "isError": True,
        "errorType": error_type,
    }


def handle_validation_error(error_message: str) -> Dict[str, Any]:
    """Create a validation error envelope."""
    return create_error_response(error_message, ErrorType.VALIDATION)


def handle_http_errors(
    operation_name: str = "operation",
    summarize: Optional[Callable[[Dict[str, Any]], str]] = None,
    meta: Optional[Callable[[Dict[str, Any]], Optional[Dict[str, Any]]]] = None
) -> Callable:
    """
    Decorator turning an async operation into an envelope-returning one.

    The wrapped coroutine returns either a structured dict, summarized with
    ``summarize``, or a plain string, which becomes a summary-only envelope.
    Any failure along the chain becomes an error envelope. Nothing is retried.

    Args:
        operation_name: Name of the operation for error messages
        summarize: Derives the summary line from the structured result
        meta: Optional builder for the opaque meta mapping

    Returns:
        Decorator function
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(*args, **kwargs) -> Dict[str, Any]:
            try:
                result = await func(*args, **kwargs)

            except UpstreamError as e:
                return create_error_response(str(e), ErrorType.HTTP)

            except httpx.TimeoutException:
                return create_error_response(
                    f"Request timed out while {operation_name}",
                    ErrorType.TIMEOUT
                )

            except httpx.TransportError as e:
                return create_error_response(
                    f"Network error while {operation_name}: {str(e)}",
                    ErrorType.NETWORK
                )

            except Exception as e:
                logger.exception(f"Unexpected failure while {operation_name}")
                return create_error_response(
                    f"Unexpected error during {operation_name}: {str(e)}",
                    ErrorType.UNEXPECTED
                )

            if isinstance(result, str):
                return create_text_response(result)
            summary = summarize(result) if summarize else operation_name
            return create_success_response(result, summary, meta(result) if meta else None)

        return wrapper
    return decorator


def to_tool_result(envelope: Dict[str, Any]) -> ToolResult:
    """
    Adapt an envelope to the FastMCP tool boundary.

    Error envelopes raise ToolError, which FastMCP reports with ``isError``
    set and the summary as the only text content.
    """
    if envelope.get("isError"):
        raise ToolError(envelope["summaryText"])
    return ToolResult(
        content=[TextContent(type="text", text=envelope["summaryText"])],
        structured_content=envelope.get("structuredContent"),
        meta=envelope.get("meta"),
    )
