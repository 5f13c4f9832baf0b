"""Immutable value types produced by authorization resolution.

Nothing here touches the store. A decision is built once per session
establishment and replaced wholesale on re-fetch; none of these objects are
mutated after construction.
"""
from __future__ import annotations
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, FrozenSet, Iterable, List, NewType, Optional, Union

from canteen_authz.constants.permissions import WILDCARD

logger = logging.getLogger(__name__)

PermissionCode = NewType('PermissionCode', str)

_CODE_RE = re.compile(r'^[a-z][a-z0-9_]*(:[a-z0-9_][a-z0-9_-]*)+$')


def parse_permission_code(raw: Any) -> PermissionCode:
    """Validate a raw code (e.g. ``manage:products``). Raises ValueError when malformed."""
    if raw == WILDCARD:
        return PermissionCode(WILDCARD)
    if not isinstance(raw, str) or not _CODE_RE.match(raw):
        raise ValueError(f'invalid permission code: {raw!r}')
    return PermissionCode(raw)


@dataclass(frozen=True)
class PermissionSet:
    codes: FrozenSet[PermissionCode] = frozenset()

    @classmethod
    def of(cls, raw_codes: Iterable[Any]) -> 'PermissionSet':
        """Build from untrusted codes; malformed entries are dropped and logged."""
        codes = set()
        for raw in raw_codes:
            try:
                codes.add(parse_permission_code(raw))
            except ValueError:
                logger.warning('Dropping malformed permission code %r', raw)
        return cls(frozenset(codes))

    @classmethod
    def wildcard(cls) -> 'PermissionSet':
        return cls(frozenset({PermissionCode(WILDCARD)}))

    @classmethod
    def empty(cls) -> 'PermissionSet':
        return cls()

    @property
    def is_wildcard(self) -> bool:
        return WILDCARD in self.codes

    def allows(self, code: str) -> bool:
        # literal match only; '*' is the sole pattern
        return self.is_wildcard or code in self.codes

    def sorted(self) -> List[str]:
        return sorted(self.codes)

    def __contains__(self, code: object) -> bool:
        return code in self.codes

    def __iter__(self):
        return iter(self.codes)

    def __len__(self) -> int:
        return len(self.codes)


@dataclass(frozen=True)
class Unrestricted:
    """No canteen filter applies."""

    def allows(self, canteen_id: str) -> bool:
        return True

    def to_dict(self) -> Dict[str, Any]:
        return {'kind': 'UNRESTRICTED'}


@dataclass(frozen=True)
class RestrictedTo:
    """Only the listed canteens; an empty set denies every row."""
    canteen_ids: FrozenSet[str] = frozenset()

    @classmethod
    def nothing(cls) -> 'RestrictedTo':
        return cls(frozenset())

    def allows(self, canteen_id: str) -> bool:
        return canteen_id in self.canteen_ids

    def to_dict(self) -> Dict[str, Any]:
        return {'kind': 'RESTRICTED', 'canteen_ids': sorted(self.canteen_ids)}


CanteenScope = Union[Unrestricted, RestrictedTo]

UNRESTRICTED = Unrestricted()


@dataclass(frozen=True)
class Principal:
    id: str
    email: Optional[str] = None


@dataclass(frozen=True)
class StaffProfile:
    id: str
    username: str
    display_name: str
    email: Optional[str]
    role_code: Optional[str]
    role_ref: Optional[str] = None
    department_ref: Optional[str] = None
    status: str = 'ACTIVE'
    created_at: Optional[datetime] = None
    synthetic: bool = False

    @classmethod
    def from_row(cls, staff) -> 'StaffProfile':
        return cls(
            id=staff.id,
            username=staff.username,
            display_name=staff.display_name,
            email=staff.email,
            role_code=staff.role_code,
            role_ref=staff.role_id,
            department_ref=staff.department_id,
            status=staff.status,
            created_at=staff.created_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'username': self.username,
            'display_name': self.display_name,
            'email': self.email,
            'role_code': self.role_code,
            'role_ref': self.role_ref,
            'department_ref': self.department_ref,
            'status': self.status,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'synthetic': self.synthetic,
        }


@dataclass(frozen=True)
class AuthorizationDecision:
    permissions: PermissionSet = field(default_factory=PermissionSet.empty)
    canteen_scope: CanteenScope = field(default_factory=RestrictedTo.nothing)


@dataclass(frozen=True)
class AuthenticatedSession:
    principal_id: str
    profile: StaffProfile
    decision: AuthorizationDecision

    @property
    def permissions(self) -> PermissionSet:
        return self.decision.permissions

    @property
    def canteen_scope(self) -> CanteenScope:
        return self.decision.canteen_scope

    @property
    def permission_codes(self) -> FrozenSet[PermissionCode]:
        return self.decision.permissions.codes

    @property
    def accessible_canteen_ids(self) -> Optional[FrozenSet[str]]:
        """None only when unrestricted; callers should prefer ``canteen_scope``."""
        scope = self.decision.canteen_scope
        if isinstance(scope, Unrestricted):
            return None
        return scope.canteen_ids

    def to_dict(self) -> Dict[str, Any]:
        return {
            'principal_id': self.principal_id,
            'profile': self.profile.to_dict(),
            'permissions': self.permissions.sorted(),
            'canteen_scope': self.canteen_scope.to_dict(),
        }
