"""
Authentication Use Cases

Registration and the password reset lifecycle.
"""

from .register_use_case import RegisterUseCase
from .request_password_reset_use_case import RequestPasswordResetUseCase
from .confirm_password_reset_use_case import ConfirmPasswordResetUseCase
from .dtos import ActionState

__all__ = [
    # Use Cases
    "RegisterUseCase",
    "RequestPasswordResetUseCase",
    "ConfirmPasswordResetUseCase",
    # DTOs
    "ActionState",
]
