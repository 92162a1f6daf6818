"""
FastAPI router for the key-fetch endpoint.

Only mounted when EXPOSE_API_KEYS_ENDPOINT=true (see main.py). It hands the
server's provider keys to a RemoteCredentialGate, so only enable it behind
an access-controlled network boundary.

Endpoints (also under /.netlify/functions/):
- OPTIONS /get-api-keys
- GET     /get-api-keys -> {"geminiKey": str|null, "mistralKey": ..., "groqKey": ...}
"""

import logging
from typing import Tuple

from fastapi import APIRouter
from fastapi.responses import JSONResponse, Response

from app.credentials import credentials_to_wire, describe_availability, read_env_credentials
from app.routers.cors import error_response, json_response, method_not_allowed, preflight_response

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Credentials"])

KEYS_PATHS: Tuple[str, ...] = ("/get-api-keys", "/.netlify/functions/get-api-keys")
KEYS_METHODS = "GET, OPTIONS"
REJECTED_METHODS = ["HEAD", "POST", "PUT", "PATCH", "DELETE", "TRACE"]


async def keys_preflight() -> Response:
    return preflight_response(KEYS_METHODS)


async def get_api_keys() -> JSONResponse:
    try:
        credentials = read_env_credentials()
    except Exception as exc:
        logger.exception("[keys_router] reading keys failed: %s", exc.__class__.__name__)
        return error_response(500, "Internal server error", KEYS_METHODS)

    logger.info("[keys_router] serving keys (available=%s)", describe_availability(credentials))
    return json_response(200, credentials_to_wire(credentials), KEYS_METHODS)


async def keys_method_not_allowed() -> JSONResponse:
    return method_not_allowed(KEYS_METHODS)


for _path in KEYS_PATHS:
    router.add_api_route(_path, keys_preflight, methods=["OPTIONS"], include_in_schema=False)
    router.add_api_route(_path, get_api_keys, methods=["GET"])
    router.add_api_route(_path, keys_method_not_allowed, methods=REJECTED_METHODS, include_in_schema=False)
