"""Identity roles, account statuses, and the per-operation role allow-lists."""

from typing import Literal, get_args

Role = Literal["SUPER_ADMIN", "ADMIN", "EDITOR", "MODERATOR", "VIEWER", "CITIZEN"]
AccountStatus = Literal["ACTIVE", "INACTIVE", "SUSPENDED", "PENDING", "LOCKED"]

ROLES: tuple[str, ...] = get_args(Role)

# Allow-lists are explicit per operation; roles are not ranked.
SUPER_ADMIN_ONLY: frozenset[str] = frozenset({"SUPER_ADMIN"})
ADMIN_ROLES: frozenset[str] = frozenset({"SUPER_ADMIN", "ADMIN"})
STAFF_ROLES: frozenset[str] = frozenset({"SUPER_ADMIN", "ADMIN", "EDITOR"})
