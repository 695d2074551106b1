"""
FastAPI guards backed by the authorization engine.

The guards expect an upstream authentication step to have stored the
actor on ``request.state.user_info`` as a dict with ``roles``, optional
``permissions`` and optional ``user_id`` and ``session_id``. The session id
is only ever taken from there, never from request headers.
"""

from typing import Any, Dict, Iterable, Optional

from fastapi import HTTPException, Request

from shared.errors import AuthorizationError
from shared.logging import get_logger, set_user_context
from .authorization.engine import AuthorizationEngine, experience_permitted
from .experiences.models import ExperienceConfig, RouteDecision


def _user_info(request: Request) -> Dict[str, Any]:
    user_info = getattr(request.state, "user_info", None)
    if not user_info:
        raise HTTPException(status_code=401, detail="Authentication required")
    set_user_context(user_info.get("user_id"), _session_id(user_info))
    return user_info


def _roles(user_info: Dict[str, Any]) -> Iterable[str]:
    return user_info.get("roles") or ()


def _session_id(user_info: Dict[str, Any]) -> Optional[str]:
    return user_info.get("session_id")


def _forbidden(message: str, **details) -> HTTPException:
    error = AuthorizationError(message, details)
    return HTTPException(status_code=403, detail=error.to_response().model_dump())


class _Guard:
    def __init__(self, engine: AuthorizationEngine):
        self.engine = engine
        self.logger = get_logger("experiences.guards")

    def _config(self, user_info: Dict[str, Any]) -> ExperienceConfig:
        roles = _roles(user_info)
        session_id = _session_id(user_info)
        if session_id:
            return self.engine.session_config(session_id, roles)
        return self.engine.resolve_config(roles)


class RouteGuard(_Guard):
    """Deny requests whose path is outside the actor's experience."""

    async def __call__(self, request: Request) -> RouteDecision:
        user_info = _user_info(request)
        config = self._config(user_info)
        decision = self.engine.evaluate_route(
            request.url.path, _roles(user_info), config.experience
        )

        if not decision.allowed:
            self.logger.warning(
                "Route denied",
                path=request.url.path,
                experience=decision.experience.value
            )
            raise _forbidden(
                decision.reason,
                experience=decision.experience.value,
                redirect_to=decision.redirect_to
            )
        return decision


class PermissionGuard(_Guard):
    """Deny requests from actors lacking a permission."""

    def __init__(self, engine: AuthorizationEngine, permission: str):
        super().__init__(engine)
        self.permission = permission

    async def __call__(self, request: Request) -> bool:
        user_info = _user_info(request)
        if not self.engine.check_permission(user_info.get("permissions") or [], self.permission):
            self.logger.warning("Permission denied", permission=self.permission)
            raise _forbidden(
                f"Missing permission {self.permission}",
                permission=self.permission
            )
        return True


class ExperienceGuard(_Guard):
    """Deny requests unless the active experience is in an allow list."""

    def __init__(self, engine: AuthorizationEngine, allowed: Iterable[Any]):
        super().__init__(engine)
        self.allowed = tuple(allowed)

    async def __call__(self, request: Request) -> ExperienceConfig:
        user_info = _user_info(request)
        config = self._config(user_info)
        if not experience_permitted(config.experience, self.allowed):
            raise _forbidden(
                f"Experience {config.experience.value} not permitted",
                experience=config.experience.value
            )
        return config
