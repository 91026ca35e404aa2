"""
Password Reset Use Cases

Request -> verify -> complete. Each step only works with the proof produced
by the previous one: a committed code, then a reset token.
"""

from .request_password_reset_use_case import RequestPasswordResetUseCase
from .verify_reset_code_use_case import VerifyResetCodeUseCase
from .complete_password_reset_use_case import CompletePasswordResetUseCase
from .dtos import (
    CompletePasswordResetCommand,
    RequestPasswordResetResponse,
    VerifyResetCodeResponse,
    CompletePasswordResetResponse,
)

__all__ = [
    # Use Cases
    "RequestPasswordResetUseCase",
    "VerifyResetCodeUseCase",
    "CompletePasswordResetUseCase",
    # DTOs - Commands
    "CompletePasswordResetCommand",
    # DTOs - Responses
    "RequestPasswordResetResponse",
    "VerifyResetCodeResponse",
    "CompletePasswordResetResponse",
]
