"""
Authentication Use Cases

Staff registration, login and password recovery.
"""

from .register_use_case import RegisterUseCase
from .login_use_case import LoginUseCase
from .forgot_password_use_case import ForgotPasswordUseCase
from .verify_otp_use_case import VerifyOtpUseCase
from .reset_password_use_case import ResetPasswordUseCase
from .dtos import (
    RegisterCommand,
    RegisterResponse,
    LoginResponse,
    UserInfo,
    ValidityInfo,
    ForgotPasswordResponse,
    VerifyOtpResponse,
    ResetPasswordResponse,
)

__all__ = [
    # Use Cases
    "RegisterUseCase",
    "LoginUseCase",
    "ForgotPasswordUseCase",
    "VerifyOtpUseCase",
    "ResetPasswordUseCase",
    # DTOs - Commands
    "RegisterCommand",
    # DTOs - Responses
    "RegisterResponse",
    "LoginResponse",
    "ForgotPasswordResponse",
    "VerifyOtpResponse",
    "ResetPasswordResponse",
    # DTOs - Nested Models
    "UserInfo",
    "ValidityInfo",
]
