"""
FastAPI router for the LLM proxy.

Endpoints (each also served under /.netlify/functions/ for existing front-ends):
- OPTIONS /llm   preflight, answered without touching the dispatcher
- POST    /llm   {prompt, model, type} -> {result} | {error}

Status codes:
- 200 success
- 400 missing or blank field(s), malformed body
- 405 any other method
- 500 unknown model/type, missing credentials, backend failure, undecodable reply
"""

import logging
from typing import Any, Dict, Tuple

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, Response

from app.llm.dispatcher import get_dispatcher
from app.llm.errors import EmptyPromptError, LLMProxyError
from app.routers.cors import error_response, json_response, method_not_allowed, preflight_response

logger = logging.getLogger(__name__)

router = APIRouter(tags=["LLM"])

LLM_PATHS: Tuple[str, ...] = ("/llm", "/.netlify/functions/llm")
LLM_METHODS = "POST, OPTIONS"
REJECTED_METHODS = ["GET", "HEAD", "PUT", "PATCH", "DELETE", "TRACE"]

MISSING_PARAMS_MESSAGE = "Missing required parameters: prompt, model, or type"


def status_for_error(exc: LLMProxyError) -> int:
    """Stable mapping from the error taxonomy to proxy status codes."""
    if isinstance(exc, EmptyPromptError):
        return 400
    return 500


async def _read_body(request: Request) -> Dict[str, Any]:
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        body = await request.json()
    except ValueError:
        raise ValueError("Request body must be valid JSON")
    if not isinstance(body, dict):
        raise ValueError("Request body must be a JSON object")
    return body


async def llm_preflight() -> Response:
    return preflight_response(LLM_METHODS)


async def llm_proxy(request: Request) -> JSONResponse:
    try:
        body = await _read_body(request)
    except ValueError as exc:
        return error_response(400, str(exc), LLM_METHODS)

    prompt, model, task_type = body.get("prompt"), body.get("model"), body.get("type")
    if not all(isinstance(v, str) and v for v in (prompt, model, task_type)):
        return error_response(400, MISSING_PARAMS_MESSAGE, LLM_METHODS)

    try:
        result = await get_dispatcher().dispatch(prompt, model, task_type)
    except LLMProxyError as exc:
        status = status_for_error(exc)
        message = str(exc) if status == 400 else f"AI model error: {exc}"
        return error_response(status, message, LLM_METHODS)
    except Exception as exc:
        logger.exception("[llm_router] unhandled error: %s", exc)
        return error_response(500, "Internal server error", LLM_METHODS)

    return json_response(200, {"result": result.to_payload()}, LLM_METHODS)


async def llm_method_not_allowed() -> JSONResponse:
    return method_not_allowed(LLM_METHODS)


for _path in LLM_PATHS:
    router.add_api_route(_path, llm_preflight, methods=["OPTIONS"], include_in_schema=False)
    router.add_api_route(_path, llm_proxy, methods=["POST"])
    router.add_api_route(_path, llm_method_not_allowed, methods=REJECTED_METHODS, include_in_schema=False)
