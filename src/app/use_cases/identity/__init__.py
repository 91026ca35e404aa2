"""
Identity Synchronization Use Cases
"""

from .change_user_role_use_case import ChangeUserRoleUseCase
from .sync_role_use_case import SyncRoleUseCase
from .dtos import ChangeUserRoleResponse, SyncRoleResponse

__all__ = [
    "ChangeUserRoleUseCase",
    "SyncRoleUseCase",
    "ChangeUserRoleResponse",
    "SyncRoleResponse",
]
