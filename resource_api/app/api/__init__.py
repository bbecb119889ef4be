"""
API package.

The service is versioned through the ``api-version`` request header
rather than through the URL, so all routes live in one tree mounted
under ``/api``.  ``router`` aggregates the domain routers defined in
``endpoints``; ``deps`` provides the FastAPI dependencies that hand the
application‑owned store and cache to the handlers.
"""
