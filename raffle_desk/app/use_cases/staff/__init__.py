"""
Staff Administration Use Cases

Admin decisions on staff accounts and profile lookups.
"""

from .approve_staff_use_case import ApproveStaffUseCase
from .extend_validity_use_case import ExtendValidityUseCase
from .update_staff_use_case import UpdateStaffUseCase
from .list_staff_use_case import ListStaffUseCase
from .get_profile_use_case import GetProfileUseCase
from .dtos import (
    StaffPatch,
    StaffAccountInfo,
    StaffListResponse,
    StaffChangeResponse,
    ProfileResponse,
)

__all__ = [
    # Use Cases
    "ApproveStaffUseCase",
    "ExtendValidityUseCase",
    "UpdateStaffUseCase",
    "ListStaffUseCase",
    "GetProfileUseCase",
    # DTOs
    "StaffPatch",
    "StaffAccountInfo",
    "StaffListResponse",
    "StaffChangeResponse",
    "ProfileResponse",
]
