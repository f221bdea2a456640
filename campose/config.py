"""CLI config and defaults for the drift check tool."""

from __future__ import annotations

import argparse
import math
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional

import yaml


@dataclass(frozen=True)
class DriftCheckConfig:
    steps: int = 1000
    angle_deg: float = 7.5
    seed: int = 0
    orthogonalize_every: int = 0
    tolerance: float = 1e-10
    log_level: str = "info"


_CONFIG_FIELDS = {f.name for f in fields(DriftCheckConfig)}
_INT_FIELDS = {"steps", "seed", "orthogonalize_every"}
_FLOAT_FIELDS = {"angle_deg", "tolerance"}
_STRING_FIELDS = {"log_level"}
_LOG_LEVELS = ("debug", "info", "warning", "error")


def _coerce_config_value(key: str, value: Any) -> Any:
    try:
        if key in _INT_FIELDS:
            if isinstance(value, bool):
                raise TypeError("bool is not an int")
            return int(value)
        if key in _FLOAT_FIELDS:
            return float(value)
        if key in _STRING_FIELDS:
            return "" if value is None else str(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"invalid value for config key '{key}': {value!r}") from exc
    raise ValueError(f"unsupported config key '{key}'")


def _normalize_config_key(raw_key: Any) -> str:
    if not isinstance(raw_key, str):
        raise ValueError(f"config key must be string, got {type(raw_key).__name__}")
    key = raw_key.strip().replace("-", "_")
    if not key:
        raise ValueError("config key cannot be empty")
    return key


def load_yaml_config(path: str) -> dict[str, Any]:
    p = Path(path)
    if not p.exists():
        raise ValueError(f"--config file not found: {p}")
    if not p.is_file():
        raise ValueError(f"--config must point to a file: {p}")

    try:
        text = p.read_text(encoding="utf-8")
    except OSError as exc:
        raise ValueError(f"failed to read --config file {p}: {exc}") from exc
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ValueError(f"failed to parse YAML config {p}: {exc}") from exc

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ValueError(f"--config root must be a mapping/object, got {type(loaded).__name__}")

    normalized: dict[str, Any] = {}
    for raw_key, raw_value in loaded.items():
        key = _normalize_config_key(raw_key)
        if key not in _CONFIG_FIELDS:
            raise ValueError(f"unknown config key in {p}: {raw_key!r}")
        normalized[key] = _coerce_config_value(key, raw_value)
    return normalized


def build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="campose-drift",
        description="Compose many small rotations and report orientation/basis drift.",
    )
    ap.add_argument(
        "--config",
        type=str,
        default="",
        help="YAML config file path. CLI args override YAML values.",
    )
    ap.add_argument(
        "--steps",
        type=int,
        default=1000,
        help="Number of incremental rotations to compose.",
    )
    ap.add_argument(
        "--angle-deg",
        type=float,
        default=7.5,
        help="Angle of each incremental rotation (deg).",
    )
    ap.add_argument("--seed", type=int, default=0, help="Seed for the random rotation axes.")
    ap.add_argument(
        "--orthogonalize-every",
        type=int,
        default=0,
        help="Re-orthogonalize the basis every N steps (0=only at the end).",
    )
    ap.add_argument(
        "--tolerance",
        type=float,
        default=1e-10,
        help="Maximum accepted basis error after the final orthogonalize.",
    )
    ap.add_argument(
        "--log-level",
        choices=list(_LOG_LEVELS),
        default="info",
        help="Global log level.",
    )
    return ap


def validate_config(cfg: DriftCheckConfig) -> None:
    if cfg.steps < 0:
        raise ValueError(f"--steps must be >= 0, got {cfg.steps}")
    if not math.isfinite(cfg.angle_deg):
        raise ValueError(f"--angle-deg must be a finite number, got {cfg.angle_deg}")
    if cfg.orthogonalize_every < 0:
        raise ValueError(
            f"--orthogonalize-every must be >= 0, got {cfg.orthogonalize_every}"
        )
    if not (cfg.tolerance > 0.0):
        raise ValueError(f"--tolerance must be > 0, got {cfg.tolerance}")
    if cfg.log_level not in _LOG_LEVELS:
        raise ValueError(
            f"--log-level must be one of debug|info|warning|error, got {cfg.log_level}"
        )


def parse_args(argv=None) -> DriftCheckConfig:
    bootstrap = argparse.ArgumentParser(add_help=False)
    bootstrap.add_argument("--config", type=str, default="")
    bootstrap_ns, _ = bootstrap.parse_known_args(argv)

    yaml_cfg: dict[str, Any] = {}
    yaml_error: Optional[str] = None
    if bootstrap_ns.config:
        try:
            yaml_cfg = load_yaml_config(bootstrap_ns.config)
        except ValueError as exc:
            yaml_error = str(exc)

    ap = build_arg_parser()
    if yaml_error is not None:
        ap.error(yaml_error)
    if yaml_cfg:
        ap.set_defaults(**yaml_cfg)
    args = ap.parse_args(argv)

    cfg = DriftCheckConfig(
        steps=args.steps,
        angle_deg=args.angle_deg,
        seed=args.seed,
        orthogonalize_every=args.orthogonalize_every,
        tolerance=args.tolerance,
        log_level=args.log_level,
    )
    try:
        validate_config(cfg)
    except ValueError as exc:
        ap.error(str(exc))
    return cfg
