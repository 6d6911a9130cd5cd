# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/firstboot/logging/log.py

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

DEFAULT_LOG_DIR = Path("/var/log/firstboot")

_FORMAT = logging.Formatter(
    "%(asctime)s | %(levelname)-7s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


def _run_log_file(base_dir: Path, name: str, run_id: str) -> Path:
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S")
    return base_dir / f"{name}-{stamp}-{run_id}.log"


def init_logging(
    *,
    base_dir: Path | None = None,
    name: str = "firstboot",
    verbose: bool = False,
) -> tuple[logging.Logger, str, Optional[Path]]:
    """
    Configure the ``firstboot`` logger for one run and return
    ``(logger, run_id, log_path)``.

    The console gets INFO (DEBUG when *verbose*); the per-run file under
    *base_dir* gets everything. Early in boot /var may not be writable yet,
    in which case only the console is used and log_path is None.
    """
    run_id = str(uuid.uuid4())

    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    for h in list(logger.handlers):
        h.close()
    logger.handlers.clear()

    console = logging.StreamHandler()
    console.setLevel(logging.DEBUG if verbose else logging.INFO)
    console.setFormatter(_FORMAT)
    logger.addHandler(console)

    base_dir = base_dir or DEFAULT_LOG_DIR
    log_path: Optional[Path] = _run_log_file(base_dir, name, run_id)
    try:
        base_dir.mkdir(parents=True, exist_ok=True)
        trace = logging.FileHandler(log_path, encoding="utf-8")
    except OSError as e:
        logger.warning("can't write log file under %s, logging to console only: %s", base_dir, e)
        log_path = None
    else:
        trace.setLevel(logging.DEBUG)
        trace.setFormatter(_FORMAT)
        logger.addHandler(trace)

    logger.debug("run %s started, trace file %s", run_id, log_path)
    return logger, run_id, log_path
