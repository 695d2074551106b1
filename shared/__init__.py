"""
Shared utilities for the Experience Access engine.

This package aggregates common building blocks consumed by the engine:

- config: Engine configuration via pydantic-settings
- logging: Structured logging with correlation context
- metrics: Prometheus decision counters
- errors: Canonical error types and responses

Cross-cutting logic should live here to avoid import cycles. Do not
import from service_experiences into shared/.
"""
