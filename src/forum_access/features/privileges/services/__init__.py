from .privilege_service import PrivilegeService, GUEST_DEFAULT_PRIVILEGES

__all__ = ["PrivilegeService", "GUEST_DEFAULT_PRIVILEGES"]
