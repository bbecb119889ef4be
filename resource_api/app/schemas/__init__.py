"""
Pydantic schema definitions for API payloads.

``user`` holds the request bodies validated before they reach the
resource store; ``common`` holds the envelope shared by every response
(HATEOAS links, page metadata and the error body).
"""
