from __future__ import annotations
import logging
from ..errors import AccessDenied, NotAuthenticated
from ..models import Actor, Role
from ..ports import AuthProvider, ProfileDirectory

logger = logging.getLogger(__name__)

PAGES = {Role.DEVELOPER: "submit", Role.EVALUATOR: "evaluate"}


def sign_in_and_route(auth: AuthProvider, profiles: ProfileDirectory, email: str, password: str) -> Actor:
    """Sign in and resolve the role that decides which page the actor lands on."""
    identity = auth.sign_in(email, password)
    raw_role = profiles.get_role(identity.user_id)
    if raw_role is None:
        auth.sign_out()
        raise AccessDenied("Failed to retrieve user profile")
    try:
        role = Role(raw_role)
    except ValueError:
        auth.sign_out()
        raise AccessDenied("Invalid user role") from None
    logger.info("%s signed in as %s", identity.email, role.value)
    return Actor(user_id=identity.user_id, email=identity.email, role=role)


def landing_page(role: Role) -> str:
    return PAGES[role]


def require_actor(auth: AuthProvider, profiles: ProfileDirectory, role: Role) -> Actor:
    """Current actor if they hold ``role``; anyone else is signed out."""
    identity = auth.get_current_actor()
    if identity is None:
        raise NotAuthenticated()
    actual = profiles.get_role(identity.user_id)
    if actual != role:
        logger.warning("Denied %s access to %s page (role=%s)", identity.email, PAGES[role], actual)
        auth.sign_out()
        raise AccessDenied(f"Access denied. {role.value.capitalize()} credentials required.")
    return Actor(user_id=identity.user_id, email=identity.email, role=role)
