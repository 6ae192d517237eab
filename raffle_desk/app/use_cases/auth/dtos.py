"""
Authentication Use Case DTOs (Data Transfer Objects)

All Command and Response classes for the staff auth domain.
"""

from datetime import datetime
from typing import Optional

from raffle_desk.app.use_cases.base_dto import CamelModel


# ============================================================================
# Command DTOs
# ============================================================================


class RegisterCommand(CamelModel):
    """Register command - raw registration form values"""

    email: str
    name: str
    password: str
    confirm_password: str


# ============================================================================
# Response DTOs
# ============================================================================


class UserInfo(CamelModel):
    """Staff summary returned to an authenticated user"""

    email: str
    name: str
    role: str


class ValidityInfo(CamelModel):
    """Account validity window"""

    validity_days: int
    expires_at: datetime
    days_remaining: int


class RegisterResponse(CamelModel):
    """Response for register use case"""

    message: str
    user: UserInfo
    account_status: str


class LoginResponse(CamelModel):
    """Response for login use case"""

    user: UserInfo
    token: str
    redirect_url: Optional[str] = None
    validity: ValidityInfo


class ForgotPasswordResponse(CamelModel):
    """Response for forgot password use case (same shape for unknown emails)"""

    message: str
    email: str


class VerifyOtpResponse(CamelModel):
    """Response for verify OTP use case"""

    message: str
    reset_token: str


class ResetPasswordResponse(CamelModel):
    """Response for reset password use case"""

    message: str
