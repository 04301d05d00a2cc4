"""Dashboard sidebar entries and who may see them"""
from dataclasses import dataclass
from typing import List, Optional

from voyage_admin.auth.permissions import HasRole, has_permission

SUPER_ADMIN_ONLY = "super_admin_only"


@dataclass(frozen=True)
class NavigationItem:
    title: str
    href: str
    permission: Optional[str]  # None = any active admin


NAVIGATION_ITEMS = (
    NavigationItem("Dashboard", "/dashboard", None),
    NavigationItem("Destinations", "/dashboard/destinations", "destinations:read"),
    NavigationItem("Tour Packages", "/dashboard/packages", "packages:read"),
    NavigationItem("Categories", "/dashboard/categories", "categories:read"),
    NavigationItem("Blog Posts", "/dashboard/blog", "blogs:read"),
    NavigationItem("Inquiries", "/dashboard/inquiries", "inquiries:read"),
    NavigationItem("Media Library", "/dashboard/media", "media:read"),
    NavigationItem("Admin Users", "/dashboard/users", SUPER_ADMIN_ONLY),
)


def can_see(profile: Optional[HasRole], item: NavigationItem) -> bool:
    if profile is None or not profile.is_active:
        return False
    if item.permission is None:
        return True
    if item.permission == SUPER_ADMIN_ONLY:
        # not a table permission; compared against the role directly
        return profile.role == "super_admin"
    return has_permission(profile, item.permission)


def visible_navigation(profile: Optional[HasRole]) -> List[NavigationItem]:
    return [item for item in NAVIGATION_ITEMS if can_see(profile, item)]
