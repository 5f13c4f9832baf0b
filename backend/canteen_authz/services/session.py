"""Compose the resolvers into one AuthenticatedSession.

Profile resolution runs first. Permission and scope resolution read disjoint
tables, so they run side by side, each on its own store session. A single
deadline covers the whole sequence; running past it fails closed.
"""
from __future__ import annotations
import logging
import time
from concurrent.futures import ThreadPoolExecutor, wait, FIRST_EXCEPTION
from typing import Callable, Optional

from canteen_authz.config.authz import DEFAULT_RESOLUTION_TIMEOUT, RESOLVER_WORKERS
from canteen_authz.services.decision import AuthenticatedSession, AuthorizationDecision, Principal
from canteen_authz.services.errors import ResolutionTimeout
from canteen_authz.services.policy import resolve_canteen_scope, resolve_permissions
from canteen_authz.services.profile import resolve_profile

logger = logging.getLogger(__name__)


def _in_session(session_factory: Callable, fn: Callable, *args):
    session = session_factory()
    try:
        return fn(session, *args)
    finally:
        session.close()


def _remaining(deadline: Optional[float]) -> Optional[float]:
    if deadline is None:
        return None
    return max(0.0, deadline - time.monotonic())


def establish_session(
    principal: Principal,
    session_factory: Callable,
    timeout: Optional[float] = DEFAULT_RESOLUTION_TIMEOUT,
) -> AuthenticatedSession:
    """Resolve profile, permissions and canteen scope for ``principal``.

    Raises IdentityUnresolvable when the profile store is unreachable and
    ResolutionTimeout when ``timeout`` seconds elapse first.
    """
    deadline = time.monotonic() + timeout if timeout is not None else None
    executor = ThreadPoolExecutor(max_workers=RESOLVER_WORKERS, thread_name_prefix='authz-resolver')
    try:
        profile_future = executor.submit(_in_session, session_factory, resolve_profile, principal)
        done, _ = wait([profile_future], timeout=_remaining(deadline))
        if not done:
            raise ResolutionTimeout(f'profile resolution for principal {principal.id} timed out')
        profile = profile_future.result()

        perm_future = executor.submit(_in_session, session_factory, resolve_permissions, profile)
        scope_future = executor.submit(_in_session, session_factory, resolve_canteen_scope, profile.id)
        done, pending = wait([perm_future, scope_future], timeout=_remaining(deadline), return_when=FIRST_EXCEPTION)
        for fut in done:
            exc = fut.exception()
            if exc is not None:
                raise exc
        if pending:
            raise ResolutionTimeout(f'authorization resolution for principal {principal.id} timed out')
        decision = AuthorizationDecision(permissions=perm_future.result(), canteen_scope=scope_future.result())
    except ResolutionTimeout:
        logger.warning('Authorization resolution timed out for principal %s; denying', principal.id)
        raise
    finally:
        executor.shutdown(wait=False, cancel_futures=True)
    return AuthenticatedSession(principal_id=principal.id, profile=profile, decision=decision)


__all__ = ['establish_session']
