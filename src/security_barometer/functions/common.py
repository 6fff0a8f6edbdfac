"""Shared request/response handling for the provider-facing backend functions.

Every function accepts POST {"source": "<provider-id>"} and replies with
JSON plus permissive CORS headers:

    wrong source          400 {"error": "Invalid source specified"}
    success               200 {"alerts": [...]}
    unexpected exception  500 {"error": "<label>", "details": "<message>"}
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse

from security_barometer.logger import get_logger

logger = get_logger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
    "Content-Type": "application/json",
}


def cors_json(body: Any, status_code: int) -> JSONResponse:
    return JSONResponse(content=body, status_code=status_code, headers=CORS_HEADERS)


def preflight() -> Response:
    return Response(status_code=204, headers=CORS_HEADERS)


async def handle_function(
    request: Request,
    expected_source: str,
    failure_label: str,
    produce: Callable[[], Awaitable[list[dict[str, Any]]]],
) -> JSONResponse:
    try:
        body = await request.json()
        source = body.get("source") if isinstance(body, dict) else None
        if source != expected_source:
            return cors_json({"error": "Invalid source specified"}, 400)

        logger.info("function_invoked", source=source)
        alerts = await produce()
        return cors_json({"alerts": alerts}, 200)
    except Exception as exc:  # every failure becomes a structured 500
        logger.exception("function_failed", source=expected_source, error=str(exc))
        return cors_json({"error": failure_label, "details": str(exc)}, 500)
