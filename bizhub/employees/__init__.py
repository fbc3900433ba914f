from .schemas import AuthenticatedUser
from .directory import EmployeeDirectory

__all__ = ["AuthenticatedUser", "EmployeeDirectory"]
