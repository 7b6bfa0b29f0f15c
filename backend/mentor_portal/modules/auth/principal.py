"""The authenticated caller, resolved once per request from the session cookie"""
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Optional
import enum

from mentor_portal.core.exceptions import InvalidSessionError


class RoleTag(str, enum.Enum):
    HOD = "HOD"
    CLASS_ADVISOR = "CLASS_ADVISOR"
    PROJECT_MENTOR = "PROJECT_MENTOR"


# Role strings accepted when creating staff
VALID_ROLES = (
    "PROJECT_MENTOR",
    "CLASS_ADVISOR",
    "HOD",
    "HOD+PROJECT_MENTOR",
    "CLASS_ADVISOR+PROJECT_MENTOR",
)


def parse_roles(role: Optional[str]) -> FrozenSet[RoleTag]:
    """
    Split a '+'-joined role string into role tags.

    Unknown tokens are ignored, so "HOD+PROJECT_MENTOR" yields
    {HOD, PROJECT_MENTOR} and "" yields an empty set.
    """
    if not role:
        return frozenset()
    known = {tag.value: tag for tag in RoleTag}
    return frozenset(
        known[token.strip()]
        for token in role.split("+")
        if token.strip() in known
    )


@dataclass(frozen=True)
class Principal:
    user_id: str
    staff_id: str
    email: str
    role: str
    department: Optional[str] = None
    section: Optional[str] = None
    roles: FrozenSet[RoleTag] = field(default=frozenset())

    def has(self, tag: RoleTag) -> bool:
        return tag in self.roles

    def has_any(self, *tags: RoleTag) -> bool:
        return any(tag in self.roles for tag in tags)

    @classmethod
    def from_claims(cls, claims: Dict[str, Any]) -> "Principal":
        """Build a principal from decoded session claims"""
        try:
            role = str(claims["role"])
            return cls(
                user_id=str(claims["userId"]),
                staff_id=str(claims["staffId"]),
                email=str(claims["email"]),
                role=role,
                department=claims.get("department") or None,
                section=claims.get("section") or None,
                roles=parse_roles(role),
            )
        except KeyError:
            raise InvalidSessionError()

    def to_claims(self) -> Dict[str, Any]:
        return {
            "userId": self.user_id,
            "staffId": self.staff_id,
            "email": self.email,
            "role": self.role,
            "department": self.department,
            "section": self.section,
        }
