"""
Logging configuration for the archive export tool.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Dict


def setup_logging(log_dir: Path, verbose: bool = False) -> Dict[str, logging.Logger]:
    """Initialize loggers and return a mapping of named loggers."""
    log_dir.mkdir(parents=True, exist_ok=True)
    stamp = datetime.utcnow().strftime("%Y-%m-%d_%H-%M-%S")
    formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    master_log = log_dir / f"export_{stamp}.log"
    error_log = log_dir / f"export_errors_{stamp}.log"
    movement_log = log_dir / f"movement_{stamp}.log"

    base_logger = logging.getLogger("elo_export")
    if not base_logger.handlers:
        base_logger.setLevel(logging.DEBUG if verbose else logging.INFO)
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(formatter)
        base_logger.addHandler(stream_handler)

        file_handler = logging.FileHandler(master_log, encoding="utf-8")
        file_handler.setFormatter(formatter)
        base_logger.addHandler(file_handler)

        error_handler = logging.FileHandler(error_log, encoding="utf-8")
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(formatter)
        base_logger.addHandler(error_handler)

    movement_logger = logging.getLogger("elo_export.movement")
    if not movement_logger.handlers:
        movement_logger.setLevel(logging.INFO)
        move_handler = logging.FileHandler(movement_log, encoding="utf-8")
        move_handler.setFormatter(formatter)
        movement_logger.addHandler(move_handler)
        movement_logger.propagate = False

    return {"main": base_logger, "movement": movement_logger}
