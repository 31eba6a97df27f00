from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from collider.tasks import RunResult

logger = logging.getLogger(__name__)


def run_command(unit: str, cmd: list[str], cwd: Path) -> RunResult:
    """Run an external compiler to completion and turn its exit into a result."""
    logger.debug("%s: %s", unit, " ".join(cmd))
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, cwd=cwd)
    except FileNotFoundError:
        return RunResult.failed(unit, unit, f"{cmd[0]} executable not found")

    if result.returncode != 0:
        message = (result.stderr or result.stdout).strip()
        return RunResult.failed(
            unit, unit, message or f"{cmd[0]} exited with code {result.returncode}"
        )
    return RunResult.success(unit)
