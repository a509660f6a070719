"""pollenTracker API layer: routes, schemas, auth, and middleware."""

from src.api.auth import create_owner_token, require_owner, verify_owner_token
from src.api.middleware import (
    RequestLoggingMiddleware,
    configure_cors,
    register_error_handlers,
)
from src.api.routes import router
from src.api.schemas import (
    AnalysisResponse,
    CategoryStatResponse,
    ErrorResponse,
    HealthResponse,
    ReadingResponse,
    SubmitFeedbackResponse,
)

__all__ = [
    "RequestLoggingMiddleware",
    "configure_cors",
    "register_error_handlers",
    "router",
    "create_owner_token",
    "require_owner",
    "verify_owner_token",
    "AnalysisResponse",
    "CategoryStatResponse",
    "ErrorResponse",
    "HealthResponse",
    "ReadingResponse",
    "SubmitFeedbackResponse",
]
