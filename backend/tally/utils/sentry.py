import logging
import os

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration

from ..exceptions import DomainException

logger = logging.getLogger(__name__)


def _parse_sample_rate(env_var: str, default: float = 0.0) -> float:
    raw_value = os.getenv(env_var)
    if raw_value is None:
        return default

    try:
        rate = float(raw_value)
    except ValueError:
        logger.warning(
            "%s is not a valid float (got %r); defaulting to %.2f",
            env_var,
            raw_value,
            default,
        )
        return default

    if not 0 <= rate <= 1:
        logger.warning(
            "%s must be between 0 and 1 (got %r); defaulting to %.2f",
            env_var,
            raw_value,
            default,
        )
        return default

    return rate


def drop_domain_errors(event, hint):
    """``before_send`` hook: payout rule violations are client errors, not bugs."""

    exc_info = (hint or {}).get("exc_info")
    if exc_info and isinstance(exc_info[1], DomainException):
        return None
    return event


def init_sentry() -> bool:
    """Initialise Sentry from ``SENTRY_*`` variables.

    Returns ``True`` when a DSN was configured and the SDK initialised.
    """
    dsn = os.getenv("SENTRY_DSN")
    if not dsn:
        logger.info("SENTRY_DSN not provided; skipping Sentry initialization.")
        return False

    environment = (os.getenv("SENTRY_ENVIRONMENT") or "").strip() or None
    release = (os.getenv("SENTRY_RELEASE") or "").strip() or None

    sentry_sdk.init(
        dsn=dsn,
        integrations=[FastApiIntegration()],
        environment=environment,
        release=release,
        traces_sample_rate=_parse_sample_rate("SENTRY_TRACES_SAMPLE_RATE"),
        profiles_sample_rate=_parse_sample_rate("SENTRY_PROFILES_SAMPLE_RATE"),
        before_send=drop_domain_errors,
        send_default_pii=False,
    )
    logger.info(
        "Initialized Sentry for payout service%s",
        f" (environment={environment})" if environment else "",
    )
    return True
