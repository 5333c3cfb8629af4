"""
Notes Service — Authentication Package

    - tokens.py:        HS256 compact token verification (pure, no I/O)
    - dependencies.py:  FastAPI bearer guard built on the verifier
"""

from notes_service.auth.tokens import Claims, TokenVerifier, verify_token

__all__ = ["Claims", "TokenVerifier", "verify_token"]
