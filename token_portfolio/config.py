"""Configuration loader — reads config.yaml, interpolates env vars, validates."""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from .holdings import validate_holding

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Frozen config dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DexScreenerConfig:
    base_url: str = "https://api.dexscreener.com/latest/dex"
    request_timeout: int = 10


@dataclass(frozen=True)
class PriceConfig:
    cache_ttl_seconds: float = 30.0
    dexscreener: DexScreenerConfig = field(default_factory=DexScreenerConfig)


@dataclass(frozen=True)
class MonitorConfig:
    refresh_interval_seconds: int = 60


@dataclass(frozen=True)
class HoldingConfig:
    ticker: str = ""
    amount: float = 0.0


@dataclass(frozen=True)
class PortfolioConfig:
    label: str = ""
    holdings: tuple[HoldingConfig, ...] = ()


@dataclass(frozen=True)
class AppConfig:
    price: PriceConfig = field(default_factory=PriceConfig)
    monitor: MonitorConfig = field(default_factory=MonitorConfig)
    portfolios: tuple[PortfolioConfig, ...] = ()


# ---------------------------------------------------------------------------
# Env interpolation
# ---------------------------------------------------------------------------

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)}")


def _interpolate_env(value: Any) -> Any:
    """Recursively replace ${VAR} references with environment variable values."""
    if isinstance(value, str):
        return _ENV_VAR_RE.sub(lambda m: os.environ.get(m.group(1), ""), value)
    if isinstance(value, dict):
        return {k: _interpolate_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_interpolate_env(item) for item in value]
    return value


# ---------------------------------------------------------------------------
# YAML → dataclass builders
# ---------------------------------------------------------------------------


def _build_price(raw: dict[str, Any]) -> PriceConfig:
    dex_raw = raw.get("dexscreener") or {}
    return PriceConfig(
        cache_ttl_seconds=float(raw.get("cache_ttl_seconds", 30.0)),
        dexscreener=DexScreenerConfig(
            base_url=dex_raw.get("base_url", DexScreenerConfig.base_url),
            request_timeout=int(dex_raw.get("request_timeout", 10)),
        ),
    )


def _build_monitor(raw: dict[str, Any]) -> MonitorConfig:
    return MonitorConfig(
        refresh_interval_seconds=int(raw.get("refresh_interval_seconds", 60)),
    )


def _build_portfolios(raw: list[dict[str, Any]]) -> tuple[PortfolioConfig, ...]:
    portfolios: list[PortfolioConfig] = []
    for p in raw:
        holdings = tuple(
            HoldingConfig(
                ticker=str(h.get("ticker") or ""),
                amount=h.get("amount", 0.0),
            )
            for h in p.get("holdings", []) or []
        )
        portfolios.append(
            PortfolioConfig(label=str(p.get("label") or ""), holdings=holdings)
        )
    return tuple(portfolios)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """Load and validate application configuration from YAML + .env.

    Args:
        config_path: Path to config.yaml. Defaults to ``config.yaml`` in the
            project root (two levels up from this file).
    """
    load_dotenv()

    if config_path is None:
        config_path = Path(__file__).resolve().parent.parent / "config.yaml"
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    raw = _interpolate_env(raw)

    cfg = AppConfig(
        price=_build_price(raw.get("price", {}) or {}),
        monitor=_build_monitor(raw.get("monitor", {}) or {}),
        portfolios=_build_portfolios(raw.get("portfolios", []) or []),
    )

    _validate(cfg)
    logger.info("Configuration loaded from %s", config_path)
    return cfg


def _validate(cfg: AppConfig) -> None:
    """Raise on invalid configuration."""
    if cfg.price.cache_ttl_seconds <= 0:
        raise ValueError("price.cache_ttl_seconds must be positive")
    if cfg.price.dexscreener.request_timeout <= 0:
        raise ValueError("price.dexscreener.request_timeout must be positive")

    if not cfg.portfolios:
        raise ValueError("At least one portfolio must be configured")

    seen: set[str] = set()
    for portfolio in cfg.portfolios:
        if not portfolio.label:
            raise ValueError("Portfolio has no label")
        if portfolio.label in seen:
            raise ValueError(f"Duplicate portfolio label '{portfolio.label}'")
        seen.add(portfolio.label)

        for holding in portfolio.holdings:
            try:
                validate_holding(holding.ticker, holding.amount)
            except ValueError as e:
                raise ValueError(
                    f"Portfolio '{portfolio.label}' has an invalid holding: {e}"
                ) from e
