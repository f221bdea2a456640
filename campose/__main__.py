"""
Camera pose drift check:
- compose N incremental rotations on a single pose
- quaternion via CameraPose.rotate, basis by rotating the stored axes
- optional periodic orthogonalize, always one at the end
- report |q| error, basis error before/after orthogonalize and the
  quaternion/basis gap

Usage:
  python -m campose --steps 5000 --angle-deg 3 --orthogonalize-every 100
"""

from __future__ import annotations

import logging

from .config import parse_args
from .drift import run_drift_check

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main(argv=None) -> int:
    cfg = parse_args(argv)
    configure_logging(cfg.log_level)
    logger.info(
        "[CONFIG] steps=%d angle=%.3fdeg seed=%d orthogonalize_every=%d tolerance=%.1e",
        cfg.steps,
        cfg.angle_deg,
        cfg.seed,
        cfg.orthogonalize_every,
        cfg.tolerance,
    )

    report = run_drift_check(cfg)
    if not report.ok:
        logger.error(
            "[DRIFT] basis error %.3e exceeds tolerance %.1e",
            report.basis_error_after,
            report.tolerance,
        )
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
