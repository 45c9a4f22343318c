"""
HTTP host for the Farm2Home functions.

This package provides a single FastAPI application that exposes:
- The callable protocol for request/response functions
- Document endpoints that fire record-creation triggers
- Manual runs of scheduled functions
"""

from api.main import app

__all__ = ["app"]
