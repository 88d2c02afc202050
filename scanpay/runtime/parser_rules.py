"""Runtime loaders for parser policy and vendor template rules."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from functools import lru_cache
from pathlib import Path
from typing import Any

from scanpay.domain.parser_rules import ParserLimits, VendorTemplate
from scanpay.runtime.logging import get_logger
from scanpay.runtime.paths import get_paths

logger = get_logger(__name__)


def _load_toml(path: Path) -> dict[str, Any]:
    """Load TOML file and return parsed dict; missing files map to empty dict."""
    try:
        import tomllib
    except ImportError:
        import tomli as tomllib  # type: ignore[no-redef]

    if not path.exists():
        return {}

    with open(path, "rb") as f:
        data = tomllib.load(f)
    return data if isinstance(data, dict) else {}


def _limit_value(table: dict[str, Any], key: str, default: Decimal) -> Decimal:
    raw = table.get(key)
    if raw is None:
        return default
    try:
        value = Decimal(str(raw))
    except InvalidOperation as exc:
        raise ValueError(f"price_limits.{key} must be a number, got {raw!r}") from exc
    if value <= 0:
        raise ValueError(f"price_limits.{key} must be positive, got {raw!r}")
    return value


@lru_cache(maxsize=4)
def load_parser_limits(config_path: str | None = None) -> ParserLimits:
    """
    Load price reasonableness bounds from parser.toml.

    Args:
        config_path: Optional TOML path override. If None, uses default project path.

    Returns:
        ParserLimits with defaults for every key the file does not set.
    """
    path = Path(config_path) if config_path is not None else get_paths().parser_rules
    table = _load_toml(path).get("price_limits", {})
    defaults = ParserLimits()
    limits = ParserLimits(
        item=_limit_value(table, "item", defaults.item),
        tax=_limit_value(table, "tax", defaults.tax),
        summary=_limit_value(table, "summary", defaults.summary),
    )
    logger.debug("Loaded parser limits from %s: %s", path, limits)
    return limits


@lru_cache(maxsize=4)
def load_vendor_templates(config_paths: tuple[str, ...] | None = None) -> tuple[VendorTemplate, ...]:
    """
    Load vendor templates, packaged defaults first, then project overrides.

    Args:
        config_paths: Optional TOML paths replacing the default search list.

    Returns:
        Templates in file order. The first matching template wins at parse time.
    """
    from scanpay.receipt.vendor_templates import build_vendor_templates

    if config_paths is None:
        p = get_paths()
        files = [p.default_vendor_templates, p.vendor_templates]
    else:
        files = [Path(path) for path in config_paths]

    templates = build_vendor_templates(_load_toml(path) for path in files)
    logger.debug("Loaded %d vendor templates", len(templates))
    return templates


def clear_rule_caches() -> None:
    """Drop cached configuration so the next load re-reads the files."""
    load_parser_limits.cache_clear()
    load_vendor_templates.cache_clear()
