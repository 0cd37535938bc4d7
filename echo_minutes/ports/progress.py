"""ProgressPort — abstract interface for reporting meeting pipeline stages.

One run reports, in order: converting (use case), starting, transcribing and
post_processing (engine adapter), composing, then done. A run that raises
reports failed instead of done before the error propagates to the caller.
"""

from abc import ABC, abstractmethod
from typing import Optional

STAGES = ("converting", "starting", "transcribing", "post_processing", "composing", "done")
FAILED_STAGE = "failed"
TERMINAL_STAGES = frozenset({"done", FAILED_STAGE})


class ProgressPort(ABC):
    @abstractmethod
    def report(
        self,
        job_id: str,
        stage: str,
        progress: float = 0.0,
        detail: Optional[str] = None,
    ) -> None:
        """Record that job_id reached stage. progress is the fraction of the whole run, 0..1."""
