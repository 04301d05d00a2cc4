"""Role → permission table.

The policy is data: each role maps to a frozen set of permission tags, and
``WILDCARD`` in a set grants everything. Roles missing from the table have no
permissions.
"""
from types import MappingProxyType
from typing import FrozenSet, Mapping, Optional, Protocol

WILDCARD = "*"

_INQUIRY_AND_PDF = (
    "inquiries:read", "inquiries:write", "inquiries:update",
    "pdf:generate", "pdf:download",
)


def _crud(resource: str) -> tuple:
    return (f"{resource}:read", f"{resource}:write", f"{resource}:delete")


ROLE_PERMISSIONS: Mapping[str, FrozenSet[str]] = MappingProxyType({
    "super_admin": frozenset({WILDCARD}),
    "content_manager": frozenset(
        _crud("destinations")
        + _crud("categories")
        + _crud("packages")
        + _crud("blogs")
        + _crud("media")
        + _INQUIRY_AND_PDF
    ),
    "staff": frozenset(_INQUIRY_AND_PDF),
})


class HasRole(Protocol):
    role: str
    is_active: bool


def permissions_for(role: str) -> FrozenSet[str]:
    return ROLE_PERMISSIONS.get(role, frozenset())


def has_permission(profile: Optional[HasRole], permission: str) -> bool:
    """Return True if an active profile's role grants ``permission``.

    ``super_admin_only`` style tags are not part of the table; gate those on
    ``profile.role == "super_admin"`` instead.
    """
    if profile is None or not profile.is_active:
        return False

    granted = permissions_for(profile.role)
    return WILDCARD in granted or permission in granted
