"""
Top‑level package for the Resource API.

All functionality lives in submodules under ``app``; import the ASGI
application as ``resource_api.app.main:app``.
"""

__all__ = []
