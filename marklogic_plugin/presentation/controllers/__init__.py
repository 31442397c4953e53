"""
Controllers Package - Presentation Layer

FastAPI routers mapping HTTP requests onto application use cases.
"""

from .plugins_controller import router as plugins_router

__all__ = ["plugins_router"]
