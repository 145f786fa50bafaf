"""
API module: FastAPI app factory, /users routes and request logging.
"""

from monthmesh.api.app import create_app
from monthmesh.api.handlers import router
from monthmesh.api.middleware import RequestLoggingMiddleware

__all__ = [
    "create_app",
    "router",
    "RequestLoggingMiddleware",
]
