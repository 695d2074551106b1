"""
Engine bootstrap for the Experience Access layer.
"""

from typing import Optional

from prometheus_client import CollectorRegistry

from shared.config import ExperienceSettings, get_config
from shared.logging import configure_logging, get_logger
from shared.metrics import get_metrics_collector
from .authorization.engine import AuthorizationEngine
from .experiences.registry import ExperienceRegistry


def create_engine(
    settings: Optional[ExperienceSettings] = None,
    registry: Optional[ExperienceRegistry] = None,
    metrics_registry: Optional[CollectorRegistry] = None
) -> AuthorizationEngine:
    """Build the authorization engine at process start.

    Constructing the registry validates it, so an incomplete experience
    table fails here with ConfigurationMissing rather than at query time.
    """
    settings = settings or get_config()
    configure_logging(settings.service_name, settings.log_level)
    logger = get_logger(f"{settings.service_name}.bootstrap")

    registry = registry or ExperienceRegistry()
    metrics = get_metrics_collector(
        settings.service_name,
        metrics_registry,
        enabled=settings.enable_metrics
    )

    engine = AuthorizationEngine(
        registry=registry,
        metrics=metrics,
        log_decisions=settings.log_decisions
    )

    logger.info(
        "Experience engine initialized",
        env=settings.env,
        experiences=len(registry),
        metrics_enabled=settings.enable_metrics
    )
    return engine
