"""
Request/response plumbing installed by ``create_app``: error
translation, API version negotiation, rate limiting and security
headers.
"""
