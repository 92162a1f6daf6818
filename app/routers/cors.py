"""
CORS helpers for the proxy endpoints.

Each endpoint advertises exactly the methods it supports, so preflight is
answered per route instead of by a global middleware.
"""

from typing import Any, Dict

from fastapi.responses import JSONResponse, Response

from config import cors_allow_origin

ALLOW_HEADERS = "Content-Type, Authorization"


def cors_headers(methods: str) -> Dict[str, str]:
    return {
        "Access-Control-Allow-Origin": cors_allow_origin(),
        "Access-Control-Allow-Headers": ALLOW_HEADERS,
        "Access-Control-Allow-Methods": methods,
    }


def preflight_response(methods: str) -> Response:
    return Response(status_code=200, headers=cors_headers(methods))


def json_response(status_code: int, content: Any, methods: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=content, headers=cors_headers(methods))


def error_response(status_code: int, message: str, methods: str) -> JSONResponse:
    return json_response(status_code, {"error": message}, methods)


def method_not_allowed(methods: str) -> JSONResponse:
    return error_response(405, "Method not allowed", methods)
