"""
API routes module.
"""

from delaytask.api.routes.health import router as health_router
from delaytask.api.routes.tasks import router as tasks_router

__all__ = ["tasks_router", "health_router"]
