"""Progress reporting for polling loops."""

import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)

# Called with (phase, elapsed_seconds); phase is "finalization" or "proof".
ProgressCallback = Callable[[str, float], None]


def report_progress(callback: ProgressCallback | None, phase: str, elapsed: float) -> None:
    """Invoke a progress callback without letting it disturb the loop."""
    if callback is None:
        return
    try:
        callback(phase, elapsed)
    except Exception as e:
        logger.warning(f"Progress callback failed during {phase} polling: {e}")
