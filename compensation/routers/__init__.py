"""FastAPI routers for the compensation API."""

from .salary import router as salary_router
from .salary_config import router as salary_config_router

__all__ = [
    "salary_config_router",
    "salary_router",
]
