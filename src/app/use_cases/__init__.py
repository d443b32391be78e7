"""
Use Cases

Organized by domain folder:
- auth/: Registration and password reset
"""

from .auth import (
    ActionState,
    ConfirmPasswordResetUseCase,
    RegisterUseCase,
    RequestPasswordResetUseCase,
)

__all__ = [
    "ActionState",
    "RegisterUseCase",
    "RequestPasswordResetUseCase",
    "ConfirmPasswordResetUseCase",
]
