# ecogest/utils/announcements.py
from typing import Dict, Iterable, List, Optional, Sequence

ALL_ROLES = ("student", "parent", "teacher", "school_admin")

AUDIENCE_ROLES: Dict[str, Sequence[str]] = {
    "élèves": ("student",),
    "eleves": ("student",),
    "students": ("student",),
    "parents": ("parent",),
    "professeurs": ("teacher",),
    "enseignants": ("teacher",),
    "teachers": ("teacher",),
    "administration": ("school_admin",),
    "tous": ALL_ROLES,
    "all": ALL_ROLES,
}


def is_visible_to(target_audience: Optional[Iterable[str]], role: str) -> bool:
    """An announcement with no audience is visible to everyone."""
    audiences = list(target_audience or [])
    if not audiences:
        return True
    role = (role or "").lower()
    return any(role in AUDIENCE_ROLES.get(audience.lower().strip(), ()) for audience in audiences)


def filter_for_role(announcements: List, role: str, is_admin: bool = False) -> List:
    """Keep the announcements a reader with ``role`` may see; admins see all."""
    if is_admin:
        return list(announcements)
    return [a for a in announcements if is_visible_to(_audience_of(a), role)]


def _audience_of(announcement):
    if isinstance(announcement, dict):
        return announcement.get("target_audience")
    return getattr(announcement, "target_audience", None)
