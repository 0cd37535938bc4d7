"""LogProgressAdapter — writes meeting pipeline stages to the log."""

import time
import logging
from typing import Dict, Optional

from echo_minutes.ports.progress import TERMINAL_STAGES, ProgressPort

logger = logging.getLogger(__name__)


class LogProgressAdapter(ProgressPort):
    def __init__(self):
        self._started: Dict[str, float] = {}

    def report(
        self,
        job_id: str,
        stage: str,
        progress: float = 0.0,
        detail: Optional[str] = None,
    ) -> None:
        started = self._started.setdefault(job_id, time.monotonic())
        msg = f"[{job_id}] {stage} {progress:.0%}"
        if detail:
            msg += f" ({detail})"
        if stage in TERMINAL_STAGES:
            self._started.pop(job_id, None)
            msg += f" in {time.monotonic() - started:.1f}s"
        logger.info(msg)
