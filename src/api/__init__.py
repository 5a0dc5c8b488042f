"""
API package - FastAPI application and REST routes.
"""
from .app import create_app

__all__ = ["create_app"]
