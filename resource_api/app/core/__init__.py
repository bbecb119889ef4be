"""
Cross‑cutting building blocks: settings, logging, errors, the TTL cache,
version negotiation and token authentication.
"""
