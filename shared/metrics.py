"""
Shared metrics configuration for the Experience Access engine.
"""

from prometheus_client import Counter, Info, CollectorRegistry
from typing import Dict, Any, Optional
import threading


class MetricsCollector:
    """Centralized metrics collector for the engine."""

    def __init__(self, service_name: str, registry: Optional[CollectorRegistry] = None,
                 enabled: bool = True):
        self.service_name = service_name
        self.registry = registry
        self.enabled = enabled
        self._metrics: Dict[str, Any] = {}
        self._setup_metrics()

    def _setup_metrics(self):
        """Set up service info and decision metrics."""

        self._metrics["service_info"] = Info(
            "service_info",
            "Service information",
            registry=self.registry
        )
        self._metrics["service_info"].info({
            "service": self.service_name,
            "version": "1.0.0"
        })

        self._setup_experience_metrics()

    def _setup_experience_metrics(self):
        """Set up experience decision metrics."""
        self._metrics["experience_resolutions_total"] = Counter(
            "experience_resolutions_total",
            "Total experience resolutions",
            ["experience"],
            registry=self.registry
        )

        self._metrics["route_checks_total"] = Counter(
            "route_checks_total",
            "Total route authorization checks",
            ["experience", "decision"],
            registry=self.registry
        )

        self._metrics["permission_checks_total"] = Counter(
            "permission_checks_total",
            "Total permission checks",
            ["decision"],
            registry=self.registry
        )

        self._metrics["override_changes_total"] = Counter(
            "override_changes_total",
            "Total experience override changes",
            ["outcome"],
            registry=self.registry
        )

    def increment_counter(self, metric_name: str, **labels):
        """Increment a counter metric."""
        if self.enabled and metric_name in self._metrics:
            self._metrics[metric_name].labels(**labels).inc()


_collectors: Dict[str, MetricsCollector] = {}
_collectors_lock = threading.Lock()


def get_metrics_collector(service_name: str, registry: Optional[CollectorRegistry] = None,
                          enabled: bool = True) -> MetricsCollector:
    """Get a metrics collector for a service.

    Collectors bound to an explicit registry are always fresh; the
    unregistered default is shared per service name.
    """
    if registry is not None:
        return MetricsCollector(service_name, registry, enabled)

    with _collectors_lock:
        collector = _collectors.get(service_name)
        if collector is None:
            collector = MetricsCollector(service_name, None, enabled)
            _collectors[service_name] = collector
        return collector
