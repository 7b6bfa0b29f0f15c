# Authentication and authorization module

from mentor_portal.modules.auth.dependencies import get_current_principal
from mentor_portal.modules.auth.principal import Principal, RoleTag, VALID_ROLES, parse_roles
from mentor_portal.modules.auth.policy import (
    Resource,
    Operation,
    Target,
    Scope,
    RowFilter,
    authorize,
    read_filter,
)

__all__ = [
    "get_current_principal",
    "Principal",
    "RoleTag",
    "VALID_ROLES",
    "parse_roles",
    "Resource",
    "Operation",
    "Target",
    "Scope",
    "RowFilter",
    "authorize",
    "read_filter",
]
