"""Mint a development bearer token for the write endpoints.

Usage:
    python create_token.py [subject] [lifetime_seconds]
"""
import sys

from resource_api.app.core.security import create_access_token

subject = sys.argv[1] if len(sys.argv) > 1 else "admin@example.com"
# default lifetime: 365 days
lifetime = int(sys.argv[2]) if len(sys.argv) > 2 else 365 * 24 * 60 * 60
print(create_access_token({"sub": subject}, expires_delta=lifetime))
