"""
Access Use Cases

Authorization of callers for protected actions.
"""

from .authorize_use_case import AuthorizeUseCase, role_satisfies
from .dtos import AuthorizedUser

__all__ = [
    "AuthorizeUseCase",
    "AuthorizedUser",
    "role_satisfies",
]
