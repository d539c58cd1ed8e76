"""
Middleware package for authentication, rate limiting, and logging
"""
from .auth import (
    api_key_middleware,
    rate_limit_middleware,
    logging_middleware,
    generate_api_key,
)

__all__ = [
    "api_key_middleware",
    "rate_limit_middleware",
    "logging_middleware",
    "generate_api_key",
]
