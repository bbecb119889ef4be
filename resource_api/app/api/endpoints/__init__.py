"""
Endpoint modules.  Each one defines an ``APIRouter`` for a single
domain; they are aggregated in ``api/router.py``.
"""
