"""
Middleware for the API - Authentication, Logging, Rate Limiting
"""
from fastapi import Request, status
from fastapi.responses import JSONResponse
from typing import Callable
import json
import logging
import time
from collections import defaultdict
import secrets
import os
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

# Only check ingestion is protected; the status API is public.
PROTECTED_PREFIX = "/events"

VALID_API_KEYS = {}

# Primary key plus API_KEY_1..API_KEY_9 with optional API_KEY_n_NAME
api_key = os.getenv("API_KEY")
if api_key:
    VALID_API_KEYS[api_key] = "Primary Client"

for i in range(1, 10):
    key = os.getenv(f"API_KEY_{i}")
    name = os.getenv(f"API_KEY_{i}_NAME", f"Client {i}")
    if key:
        VALID_API_KEYS[key] = name

if not VALID_API_KEYS:
    logger.warning("⚠️ No API keys found in environment! Using default key for development.")
    VALID_API_KEYS["your-api-key-here"] = "Development Client"

# site_name -> list of request timestamps
rate_limit_storage = defaultdict(list)
RATE_LIMIT_REQUESTS = 400  # requests
RATE_LIMIT_WINDOW = 60  # seconds


def verify_api_key(api_key: str) -> bool:
    return api_key in VALID_API_KEYS


def get_client_name(api_key: str) -> str:
    return VALID_API_KEYS.get(api_key, "Unknown")


def check_rate_limit(site_name: str) -> tuple[bool, int]:
    """
    Check if a site has exceeded the ingestion rate limit.
    Returns: (is_allowed, requests_remaining)
    """
    now = time.time()
    window_start = now - RATE_LIMIT_WINDOW

    rate_limit_storage[site_name] = [
        ts for ts in rate_limit_storage[site_name]
        if ts > window_start
    ]

    current_requests = len(rate_limit_storage[site_name])
    if current_requests >= RATE_LIMIT_REQUESTS:
        return False, 0

    rate_limit_storage[site_name].append(now)
    return True, RATE_LIMIT_REQUESTS - current_requests - 1


async def api_key_middleware(request: Request, call_next: Callable):
    """Require X-API-Key (or Bearer token) on /events routes."""
    if not request.url.path.startswith(PROTECTED_PREFIX):
        return await call_next(request)

    api_key = request.headers.get("X-API-Key") or request.headers.get("Authorization")
    if api_key and api_key.startswith("Bearer "):
        api_key = api_key.replace("Bearer ", "", 1)

    if not api_key or not verify_api_key(api_key):
        client_ip = request.client.host if request.client else "unknown"
        logger.warning(f"❌ Invalid API key attempt from {client_ip}")
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={
                "error": "Invalid or missing API key",
                "message": "Please provide a valid API key in X-API-Key header"
            }
        )

    request.state.client_name = get_client_name(api_key)
    request.state.api_key = api_key
    logger.info(f"✅ Authenticated: {request.state.client_name}")

    return await call_next(request)


async def rate_limit_middleware(request: Request, call_next: Callable):
    """Per-site rate limiting for check ingestion."""
    if not request.url.path.startswith(PROTECTED_PREFIX) or request.method != "POST":
        return await call_next(request)

    body = await request.body()
    try:
        data = json.loads(body) if body else {}
    except (json.JSONDecodeError, UnicodeDecodeError):
        # Let request validation report the malformed body
        data = {}
    site_name = data.get("site_name") if isinstance(data, dict) else None

    if site_name:
        is_allowed, remaining = check_rate_limit(str(site_name))
        if not is_allowed:
            logger.warning(f"⚠️ Rate limit exceeded for site {site_name}")
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content={
                    "error": "Rate limit exceeded",
                    "message": f"Too many checks for site {site_name}. Try again later.",
                    "retry_after": RATE_LIMIT_WINDOW
                }
            )
        request.state.rate_limit_remaining = remaining

    response = await call_next(request)

    if hasattr(request.state, "rate_limit_remaining"):
        response.headers["X-RateLimit-Limit"] = str(RATE_LIMIT_REQUESTS)
        response.headers["X-RateLimit-Remaining"] = str(request.state.rate_limit_remaining)
        response.headers["X-RateLimit-Window"] = str(RATE_LIMIT_WINDOW)

    return response


async def logging_middleware(request: Request, call_next: Callable):
    """Log every request with its status and timing."""
    start_time = time.time()

    client_ip = request.client.host if request.client else "unknown"
    client_name = getattr(request.state, "client_name", "Anonymous")
    logger.info(f"📥 {request.method} {request.url.path} from {client_ip} ({client_name})")

    try:
        response = await call_next(request)
    except Exception as e:
        duration = (time.time() - start_time) * 1000
        logger.error(f"❌ {request.method} {request.url.path} → ERROR ({duration:.0f}ms): {str(e)}")
        raise

    duration = (time.time() - start_time) * 1000
    status_emoji = "✅" if response.status_code < 400 else "❌"
    logger.info(
        f"{status_emoji} {request.method} {request.url.path} "
        f"→ {response.status_code} ({duration:.0f}ms)"
    )
    response.headers["X-Process-Time"] = f"{duration:.2f}ms"
    return response


def generate_api_key() -> str:
    """Generate a new secure API key"""
    return secrets.token_urlsafe(32)


def add_api_key(key: str, client_name: str):
    VALID_API_KEYS[key] = client_name
    logger.info(f"✅ Added API key for: {client_name}")


def remove_api_key(key: str):
    if key in VALID_API_KEYS:
        client_name = VALID_API_KEYS.pop(key)
        logger.info(f"🗑️ Removed API key for: {client_name}")
        return True
    return False
