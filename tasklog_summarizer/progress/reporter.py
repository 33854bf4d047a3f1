"""
Staged progress reporting for the summarization pipeline.

Stages are an ordered list of (name, message, percentage) descriptors. The
reporter walks them in order and hands each reported stage to a callback.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence


@dataclass(frozen=True)
class ProgressStage:
    name: str
    message: str
    percentage: int

    def __str__(self) -> str:
        return f"{self.message} ({self.percentage}%)"


ProgressCallback = Callable[[ProgressStage], None]


SUMMARY_PROGRESS_STAGES = [
    ProgressStage('init', 'initializing', 0),
    ProgressStage('loading_embedding_model', 'downloading embedding model (this may take a while)', 10),
    ProgressStage('preprocess', 'preprocessing tasks', 20),
    ProgressStage('filter_work_tasks', 'filtering work tasks', 30),
    ProgressStage('grouping_task_titles', 'grouping tasks by title', 45),
    ProgressStage('parse_task_descriptions', 'parsing task descriptions', 60),
    ProgressStage('remove_similar_descriptions', 'removing similar task descriptions', 80),
    ProgressStage('finalizing', 'format and sorting summary', 90),
    ProgressStage('done', 'summary complete', 100),
]


class ProgressReporter:
    """
    Finite ordered state machine over named stages.

    The current index points at the next unreported stage; it reaches
    ``len(stages)`` once the last stage has been reported or skipped.
    """

    def __init__(self, stages: Sequence[ProgressStage] = SUMMARY_PROGRESS_STAGES):
        self.logger = logging.getLogger(__name__)
        self._stages: List[ProgressStage] = list(stages)
        self._index_by_name: Dict[str, int] = {}
        for index, stage in enumerate(self._stages):
            if stage.name in self._index_by_name:
                raise ValueError(f"Duplicate progress stage '{stage.name}'")
            self._index_by_name[stage.name] = index
        self._current_index = 0
        self._callback: Optional[ProgressCallback] = None

    def on_progress(self, callback: ProgressCallback):
        """Register the callback fired for every reported stage."""
        self._callback = callback

    def report(self, stage_name: Optional[str] = None):
        """Report the named stage, or the next unreported one."""
        index = self._resolve(stage_name)
        if index is None:
            return

        self._current_index = index + 1
        if self._callback:
            self._callback(self._stages[index])

    def skip(self, stage_name: Optional[str] = None):
        """Advance past the named (or next) stage without firing the callback."""
        index = self._resolve(stage_name)
        if index is None:
            return
        self._current_index = index + 1

    def reset(self):
        self._current_index = 0

    def is_complete(self) -> bool:
        return self._current_index >= len(self._stages)

    def current_stage(self) -> Optional[ProgressStage]:
        """The next stage that would be reported, or None when complete."""
        if self.is_complete():
            return None
        return self._stages[self._current_index]

    def stage_names(self) -> List[str]:
        return [stage.name for stage in self._stages]

    def _resolve(self, stage_name: Optional[str]) -> Optional[int]:
        if stage_name is None:
            if self.is_complete():
                self.logger.warning("No more stages available to report")
                return None
            return self._current_index

        index = self._index_by_name.get(stage_name)
        if index is None:
            self.logger.warning(f"Progress stage '{stage_name}' not found in configuration")
        return index


class DebouncedProgressReporter:
    """
    Coalesces rapid status updates into at most one per debounce window.

    A status arriving inside the window is held as pending and replaces any
    earlier pending one. It is delivered by a timer on the running event loop
    (when there is one), by the next report after the window, or by ``flush``.
    """

    def __init__(self, on_progress: Callable[[str], None], debounce_ms: int = 100):
        self.on_progress = on_progress
        self.debounce = debounce_ms / 1000.0
        self._last_update: Optional[float] = None
        self._pending: Optional[str] = None
        self._timer: Optional[asyncio.TimerHandle] = None

    def report(self, status: str):
        now = time.monotonic()

        if self._last_update is None or now - self._last_update >= self.debounce:
            self._emit(status)
            return

        self._pending = status
        self._cancel_timer()

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop: the pending status waits for flush() or the next report
            return

        delay = self.debounce - (now - self._last_update)
        self._timer = loop.call_later(delay, self.flush)

    def flush(self):
        """Deliver the pending status immediately, if any."""
        if self._pending is not None:
            self._emit(self._pending)

    def destroy(self):
        """Drop any pending status and timer."""
        self._pending = None
        self._cancel_timer()

    def _emit(self, status: str):
        self.on_progress(status)
        self._last_update = time.monotonic()
        self._pending = None
        self._cancel_timer()

    def _cancel_timer(self):
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
