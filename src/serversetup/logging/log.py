# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

#src/serversetup/logging/log.py

from __future__ import annotations

import logging
from pathlib import Path
from datetime import datetime, timezone
import uuid

def init_logging(
    *,
    base_dir: Path | None = None,
    name: str = "serversetup",
    verbose: bool = False,
) -> tuple[logging.Logger, str, Path]:
    """
    Set up the "serversetup" logger for one CLI invocation.

    The run log under ~/.serversetup/logs keeps the DEBUG trace: every
    transport check, SSH login attempt and remote command with its host and
    port, so a failed bootstrap can be diagnosed after the fact. The console
    gets INFO (stage progress and failures) unless verbose is set.

    Returns (logger, run_id, log_path). The run_id is handed to
    HostBootstrapper so lifecycle events and the log file share it.
    """
    run_id = str(uuid.uuid4())

    if base_dir is None:
        base_dir = Path.home() / ".serversetup" / "logs"
    base_dir.mkdir(parents=True, exist_ok=True)

    ts = datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S")
    log_path = base_dir / f"{name}-{ts}-{run_id}.log"

    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)
    for h in list(logger.handlers):
        h.close()
    logger.handlers.clear()
    logger.propagate = False

    formatter = logging.Formatter(
        "%(asctime)s | %(levelname)-7s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    fh = logging.FileHandler(log_path)
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(formatter)

    ch = logging.StreamHandler()
    ch.setLevel(logging.DEBUG if verbose else logging.INFO)
    ch.setFormatter(formatter)

    logger.addHandler(fh)
    logger.addHandler(ch)

    logger.debug("=== serversetup run started ===")
    logger.debug(f"run_id={run_id}")
    logger.debug(f"log_file={log_path}")

    return logger, run_id, log_path
