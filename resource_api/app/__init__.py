"""
Application package.

``main`` assembles the FastAPI app; ``core`` holds settings, logging,
errors, the TTL cache, version negotiation and token handling;
``services`` holds the record store, the pagination engine and the
user service; ``api`` and ``middleware`` hold the HTTP layer.
"""

from .main import app, create_app  # noqa: F401
