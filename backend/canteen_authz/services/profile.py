from __future__ import annotations
import logging
from datetime import datetime, timezone
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from canteen_authz.constants.permissions import VIEWER, STATUS_ACTIVE
from canteen_authz.models.authz import Staff
from canteen_authz.services.decision import Principal, StaffProfile
from canteen_authz.services.errors import IdentityUnresolvable

logger = logging.getLogger(__name__)


def synthesize_profile(principal: Principal) -> StaffProfile:
    """Minimal VIEWER profile for a principal without a staff record. Never persisted."""
    local_part = principal.email.split('@', 1)[0] if principal.email else ''
    name = local_part or principal.id
    return StaffProfile(
        id=principal.id,
        username=name,
        display_name=name,
        email=principal.email,
        role_code=VIEWER,
        status=STATUS_ACTIVE,
        created_at=datetime.now(timezone.utc),
        synthetic=True,
    )


def resolve_profile(session: Session, principal: Principal) -> StaffProfile:
    try:
        staff = session.execute(select(Staff).where(Staff.id == principal.id)).scalar_one_or_none()
    except SQLAlchemyError as exc:
        raise IdentityUnresolvable(f'Staff profile lookup failed for principal {principal.id}') from exc
    if staff is None:
        logger.info('No staff profile for principal %s; using synthesized %s profile', principal.id, VIEWER)
        return synthesize_profile(principal)
    return StaffProfile.from_row(staff)
