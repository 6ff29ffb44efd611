# src/html_shell/core/services/options_service.py
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from html_engine.model import FormatOptions, ValidatorOptions
from html_shell.core.managers.config_manager import config_manager

logger = logging.getLogger(__name__)


def _section(name: str, model) -> Dict[str, Any]:
    """Reads a config section, keeping only keys the model knows about."""
    section = config_manager.section(name)
    known = set(model.model_fields)
    unknown = set(section) - known
    if unknown:
        logger.warning("Ignoring unknown '%s' settings: %s", name, ", ".join(sorted(unknown)))
    return {k: v for k, v in section.items() if k in known}


def build_format_options(mode: str, overrides: Optional[Dict[str, Any]] = None) -> FormatOptions:
    """
    Config defaults ('formatter.*') < CLI overrides (None values are ignored).

    Raises:
        pydantic.ValidationError: The merged settings are invalid.
    """
    merged = _section("formatter", FormatOptions)
    merged.update({k: v for k, v in (overrides or {}).items() if v is not None})
    merged["mode"] = mode
    return FormatOptions.model_validate(merged)


def build_validator_options(overrides: Optional[Dict[str, Any]] = None) -> ValidatorOptions:
    """Config defaults ('validator.*') < CLI overrides (None values are ignored)."""
    merged = _section("validator", ValidatorOptions)
    merged.update({k: v for k, v in (overrides or {}).items() if v is not None})
    return ValidatorOptions.model_validate(merged)
