"""Debug tracing utilities for the analysis call."""

from __future__ import annotations

import json
import logging
from typing import Any

log = logging.getLogger(__name__)


def _format_value(value: Any, max_length: int | None = 300) -> str:
    """Format a value for display, truncating if needed."""
    if isinstance(value, str):
        s = value
    elif isinstance(value, bytes):
        s = f"<bytes {len(value)} bytes>"
    elif isinstance(value, dict):
        s = json.dumps(value, indent=2, ensure_ascii=False, default=str)
    else:
        s = str(value)

    if max_length is not None and len(s) > max_length:
        return s[:max_length] + f"\n... (truncated {len(s) - max_length} chars)"
    return s


def trace_prompt(prompt: str) -> None:
    """Log the rendered analysis prompt."""
    log.debug("=" * 80)
    log.debug("ANALYSIS PROMPT")
    log.debug("=" * 80)
    log.debug(_format_value(prompt, max_length=None))
    log.debug("=" * 80)


def trace_model_config(model_name: str, base_url: str, temperature: float) -> None:
    """Log model configuration."""
    log.debug("=" * 80)
    log.debug("MODEL CONFIGURATION")
    log.debug("=" * 80)
    log.debug(f"Model: {model_name}")
    log.debug(f"Base URL: {base_url}")
    log.debug(f"Temperature: {temperature}")
    log.debug("=" * 80)


def trace_raw_output(raw: str) -> None:
    """Log the raw model output before parsing."""
    log.debug("=" * 80)
    log.debug("RAW MODEL OUTPUT")
    log.debug("=" * 80)
    log.debug(_format_value(raw, max_length=None))
    log.debug("=" * 80)


def trace_final_output(output: Any) -> None:
    """Log the final validated analysis."""
    log.debug("=" * 80)
    log.debug("FINAL OUTPUT")
    log.debug("=" * 80)
    log.debug(_format_value(output, max_length=None))
    log.debug("=" * 80)
