"""Sentry error reporting for catalog access and song matching."""

import logging

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration

logger = logging.getLogger(__name__)

BREADCRUMB_CATEGORY = "catalog"


def init_sentry(
    dsn: str | None,
    environment: str = "production",
    release: str | None = None,
    traces_sample_rate: float = 0.0,
) -> None:
    """Initialize Sentry SDK with FastAPI integration.

    Args:
        dsn: Sentry DSN. If empty, Sentry stays disabled.
        environment: Deployment environment ("production", "development")
        release: Optional release version string
        traces_sample_rate: Fraction of requests traced for performance
    """
    if not dsn:
        logger.info("Sentry DSN not configured, error reporting disabled")
        return

    sentry_sdk.init(
        dsn=dsn,
        environment=environment,
        release=release,
        integrations=[FastApiIntegration()],
        traces_sample_rate=traces_sample_rate,
        send_default_pii=False,
    )

    logger.info(f"Sentry initialized (environment: {environment})")


def add_catalog_breadcrumb(operation: str, **data) -> None:
    """Record a catalog query so a later failure shows what led up to it."""
    sentry_sdk.add_breadcrumb(
        category=BREADCRUMB_CATEGORY,
        message=operation,
        data=data,
        level="info",
    )


def capture_match_failure(error: Exception, title: str, artist: str = "") -> None:
    """Report a matching failure that was swallowed to keep the request alive.

    The song being matched is attached on an isolated scope, so concurrent
    lookups in the same request do not overwrite each other's context.
    """
    with sentry_sdk.new_scope() as scope:
        scope.set_tag("catalog.operation", getattr(error, "operation", None) or "unknown")
        scope.set_context("song", {"title": title, "artist": artist})
        sentry_sdk.capture_exception(error)
