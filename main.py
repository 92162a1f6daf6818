# FILE: main.py
"""
JustBuilt LLM Proxy - FastAPI Application
Version: 1.0.0

Server-side proxy that keeps provider keys off the browser:
- POST /llm: dispatch {prompt, model, type} to Gemini, Mistral or Groq and
  return the normalized plan / file structure / code
- GET /get-api-keys: key-fetch endpoint (only when EXPOSE_API_KEYS_ENDPOINT=true)
- GET /ping: health check + provider availability

Run:
    uvicorn main:app --reload
"""
import os
import logging

from fastapi import FastAPI
from dotenv import load_dotenv

# Load .env FIRST before any other imports that might need env vars
load_dotenv()

from config import (
    PROVIDER_CONFIGS,
    credentials_url,
    keys_endpoint_enabled,
    lenient_decode_enabled,
    missing_key_names,
)
from app.credentials import describe_availability, read_env_credentials
from app.routers.llm import router as llm_router

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
)

app = FastAPI(
    title="JustBuilt LLM Proxy",
    version="1.0.0",
    description="Dispatches prompts to interchangeable LLM backends and normalizes their replies",
)


# ====== STARTUP ======

@app.on_event("startup")
def on_startup():
    # Presence only; key values are never printed.
    print("[startup] Checking provider keys...")
    for name in missing_key_names():
        print(f"[startup] {name}: [X] NOT SET - provider unavailable")
    for cfg in PROVIDER_CONFIGS.values():
        if cfg.read_key():
            print(f"[startup] {cfg.env_key_name}: [OK] set ({cfg.display_name}, model={cfg.model})")

    if credentials_url():
        print("[startup] Credentials: fetched once from CREDENTIALS_URL")
    else:
        print("[startup] Credentials: read from environment")

    if lenient_decode_enabled():
        print("[startup] LLM_LENIENT_DECODE: [!] undecodable plan/structure replies pass through as text")

    if keys_endpoint_enabled():
        print("[startup] Key-fetch endpoint: [!] ENABLED - GET /get-api-keys returns provider keys")
    else:
        print("[startup] Key-fetch endpoint: [X] DISABLED")


# ====== ROUTERS ======

app.include_router(llm_router)

# Key-fetch router - optional based on feature flag
if keys_endpoint_enabled():
    from app.routers.keys import router as keys_router

    app.include_router(keys_router)


# ====== PUBLIC ENDPOINTS ======

@app.get("/ping")
def ping():
    """Health check (public). Reports which providers have a key, never the keys."""
    return {"status": "ok", "providers": describe_availability(read_env_credentials())}
