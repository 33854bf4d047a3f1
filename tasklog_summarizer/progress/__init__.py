"""Progress reporting and cooperative chunking."""

from .batching import process_batch_in_chunks, process_in_chunks, yield_control
from .reporter import (
    SUMMARY_PROGRESS_STAGES,
    DebouncedProgressReporter,
    ProgressReporter,
    ProgressStage,
)

__all__ = [
    'SUMMARY_PROGRESS_STAGES',
    'DebouncedProgressReporter',
    'ProgressReporter',
    'ProgressStage',
    'process_batch_in_chunks',
    'process_in_chunks',
    'yield_control',
]
