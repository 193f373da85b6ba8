# volunteer_api/auth/__init__.py
"""
Authentication modules for the volunteer API.

This package contains:
- identity.py: Canonical authenticated identity model
- firebase.py: Firebase ID token verification
"""
from volunteer_api.auth.identity import Identity

__all__ = ["Identity"]
