"""
API server module for streamer status endpoints.

Provides HTTP endpoints for:
- /lake/v0/health - Health check endpoint
- /lake/v0/progress - Streamer progress
- /metrics - Prometheus metrics
"""

from .server import ApiServer, ApiServerConfig

__all__ = [
    "ApiServer",
    "ApiServerConfig",
]
