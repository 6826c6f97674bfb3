"""
Clinic-scoped permission lookup.
"""

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Optional, Union

from shared.logging import get_logger
from .models import Permission, Role, User


@dataclass
class ClinicMembership:
    """A user's membership in the currently selected clinic.

    Supplies ``has_permission`` to the access evaluator. The clinic role
    can differ from the user's global role; ``super_admin`` in either
    place grants everything.
    """
    user: User
    role: Role
    permissions: FrozenSet[str] = field(default_factory=frozenset)

    def __post_init__(self):
        self.role = Role(self.role)
        self.permissions = frozenset(
            p.value if isinstance(p, Permission) else p for p in self.permissions
        )
        self.logger = get_logger("navigation.membership")

    def _is_super_admin(self) -> bool:
        return Role.SUPER_ADMIN in (self.user.role, self.role)

    def has_permission(self, permission: Union[str, Permission]) -> bool:
        """Check a single permission key in this clinic."""
        if self._is_super_admin():
            return True
        key = permission.value if isinstance(permission, Permission) else permission
        granted = key in self.permissions
        self.logger.debug("Permission lookup", permission=key, granted=granted)
        return granted

    def has_role(self, roles: Union[Role, str, Iterable[Union[Role, str]]]) -> bool:
        """Check whether the clinic role is one of ``roles``."""
        if self._is_super_admin():
            return True
        if isinstance(roles, str):
            roles = [roles]
        return self.role in {Role(r) for r in roles}

    @classmethod
    def from_keys(cls, user: User, role: Optional[Role] = None,
                  permissions: Iterable[str] = ()) -> "ClinicMembership":
        """Build a membership from raw permission strings."""
        return cls(user=user, role=role or user.role, permissions=frozenset(permissions))
