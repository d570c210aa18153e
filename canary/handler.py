"""Serverless entry point invoked by the scheduled event rule."""

import asyncio
from typing import Any, Dict, Optional

from .config.loader import ConfigLoader
from .config.models import DEFAULT_TARGETS
from .config.settings import Settings
from .utils.logger import setup_logger
from .workflow import CanaryWorkflow


def targets_from_event(event: Optional[Dict[str, Any]]) -> Dict[str, str]:
    """Target mapping from ``event["urls"]``, or the built-in default set."""
    urls = (event or {}).get("urls")
    if urls is None:
        return dict(DEFAULT_TARGETS)
    return dict(urls)


def handler(event, context):
    """
    Run the canary once for the targets in the invocation event.

    Args:
        event: Invocation payload, optionally carrying ``urls``
        context: Runtime context (unused)

    Returns:
        dict: JSON-safe run summary
    """
    logger = setup_logger("canary", Settings.log_level())
    config = ConfigLoader.from_env()
    workflow = CanaryWorkflow(config, logger)

    report = asyncio.run(workflow.run(targets_from_event(event)))
    return report.to_dict()
