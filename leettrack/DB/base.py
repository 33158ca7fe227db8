"""ORM nexus. Auto-discover models."""

from __future__ import annotations

import importlib
import pkgutil
import logging
import os
from pathlib import Path

from sqlalchemy.orm import DeclarativeBase

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base mold."""
    pass


def _discover_feature_models():
    """Sweep feature model modules."""
    if os.getenv("SKIP_MODEL_DISCOVERY", "false").lower() == "true":
        logger.info("Skip sweep (env flag).")
        return

    root = Path(__file__).resolve().parent.parent  # leettrack/
    features_dir = root / "features"
    if not features_dir.is_dir():
        logger.warning("No features dir: %s", features_dir)
        return

    package_prefix = "leettrack.features"
    discovered = 0
    for pkg in pkgutil.walk_packages([str(features_dir)], prefix=f"{package_prefix}."):
        if not pkg.name.endswith(".models"):
            continue
        importlib.import_module(pkg.name)
        discovered += 1
    logger.debug("Discovered %d model modules", discovered)


_discover_feature_models()

__all__ = ["Base"]
