"""Error handling utilities: structured logging and error responses."""
from __future__ import annotations

import logging
from typing import Any

logger = logging.getLogger(__name__)


def node_for_path(path: str) -> str:
    """Map a request path onto the API area reported in error envelopes."""
    if "/options" in path:
        return "options"
    if "/campaign" in path:
        return "campaigns"
    if "/scenarios" in path:
        return "scenarios"
    if "/generate" in path:
        return "generate"
    return "api"


def log_error_with_context(
    error: Exception,
    node_name: str,
    campaign_id: str | None = None,
    scenario_id: str | None = None,
    endpoint: str | None = None,
    extra_context: dict[str, Any] | None = None,
) -> None:
    """
    Log an error with full context: campaign_id, scenario_id, endpoint, and stack trace.

    Args:
        error: The exception that occurred
        node_name: API area (e.g., 'generate', 'campaigns', 'options')
        campaign_id: Campaign ID for context
        scenario_id: Scenario ID for context
        endpoint: Request path or handler name
        extra_context: Additional context dict to include in log
    """
    context_parts = []
    if campaign_id:
        context_parts.append(f"campaign_id={campaign_id}")
    if scenario_id:
        context_parts.append(f"scenario_id={scenario_id}")
    if endpoint:
        context_parts.append(f"endpoint={endpoint}")
    context_str = ", ".join(context_parts) if context_parts else "no context"

    extra = {}
    if extra_context:
        extra.update(extra_context)
    if campaign_id:
        extra["campaign_id"] = campaign_id
    if scenario_id:
        extra["scenario_id"] = scenario_id
    extra["node_name"] = node_name

    logger.error(
        f"[{node_name}] Error: {type(error).__name__}: {str(error)} ({context_str})",
        exc_info=True,
        extra=extra,
    )


def create_error_response(
    error_code: str,
    message: str,
    node: str | None = None,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Create a structured error response for API endpoints.

    Args:
        error_code: Error code (e.g., 'CAMPAIGNS_HTTP_404', 'GENERATE_VALIDATION')
        message: Human-readable error message
        node: API area where the error occurred
        details: Additional error details

    Returns:
        Structured error dict
    """
    response: dict[str, Any] = {
        "error_code": error_code,
        "message": message,
    }
    if node:
        response["node"] = node
    if details:
        response["details"] = details
    return response
