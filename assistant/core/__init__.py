from .memory import MessageWindowMemory
from .roles import PREDEFINED_ROLES, get_role, list_roles

__all__ = ["MessageWindowMemory", "PREDEFINED_ROLES", "get_role", "list_roles"]
