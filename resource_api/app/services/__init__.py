"""
Service layer.

``resource_store`` owns the records, ``pagination`` renders pages over
a store and ``user_service`` combines both with the TTL cache for the
user collection.  API handlers only talk to ``UserService``.
"""
