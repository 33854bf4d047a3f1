"""
Summary agent that turns a snapshot of tracked tasks into grouped summaries.

The enhanced pipeline normalizes and filters tasks while the models load,
groups titles, parses descriptions into work items, removes semantic
duplicates and orders the result. If any model service fails, the whole
run is redone on the fallback path, which groups by exact title and only
removes exact duplicates.
"""

import asyncio
import logging
import time
from typing import Any, Callable, Dict, Iterable, List, Optional

from tasklog_summarizer.clustering.deduplicator import Deduplicator, dedupe_exact
from tasklog_summarizer.clustering.title_grouper import TitleGrouper, distinct_titles, group_by_exact_title
from tasklog_summarizer.config.settings import Settings, get_settings
from tasklog_summarizer.extractors.description_parser import DescriptionParser
from tasklog_summarizer.formatting.summary_formatter import format_summary_groups
from tasklog_summarizer.models.services import (
    SentenceValidityService,
    TitleClassificationService,
    get_model_registry,
)
from tasklog_summarizer.processors.normalizer import TaskNormalizer
from tasklog_summarizer.processors.work_filter import WorkTaskFilter
from tasklog_summarizer.progress.batching import yield_control
from tasklog_summarizer.progress.reporter import DebouncedProgressReporter, ProgressReporter
from tasklog_summarizer.schema import ParsedTask, SummaryGroup, TrackedTask


ERROR_STATUS = 'Error generating summary'


class TaskSummaryAgent:
    """
    Orchestrates the summarization pipeline.

    Model services can be injected; any that are not are taken from the
    process-wide model registry.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        embedder=None,
        title_classifier=None,
        sentence_validator=None
    ):
        """
        Initialize the agent.

        Args:
            settings: Configuration, defaults to the global settings
            embedder: Service with ``load()`` and ``embed(texts)``
            title_classifier: Service with ``load()`` and ``classify(titles)``
            sentence_validator: Service with ``load()`` and ``validate(segments)``
        """
        self.settings = settings or get_settings()
        self.logger = logging.getLogger(__name__)

        summarization = self.settings.summarization
        needs_classifier = summarization.grouping_strategy == 'classifier'
        needs_validator = summarization.validate_segments

        if embedder is None:
            registry = get_model_registry(self.settings)
            embedder = registry.embedding
            title_classifier = title_classifier or registry.title_classifier
            sentence_validator = sentence_validator or registry.sentence_validator
        else:
            # Classifier heads not passed in run over the injected embedder
            if title_classifier is None and needs_classifier:
                title_classifier = TitleClassificationService(embedder, self.settings.classifier)
            if sentence_validator is None and needs_validator:
                sentence_validator = SentenceValidityService(embedder, self.settings.classifier)

        self.embedder = embedder
        self.title_classifier = title_classifier if needs_classifier else None
        self.sentence_validator = sentence_validator if needs_validator else None

        self.normalizer = TaskNormalizer(
            self.settings.normalizer.abbreviations,
            fallback_title=summarization.fallback_title
        )
        self.work_filter = WorkTaskFilter(
            self.settings.work_filter.work_keywords,
            self.settings.work_filter.non_work_keywords
        )

        # Performance tracking
        self.metrics = {
            'total_runs': 0,
            'successful_runs': 0,
            'fallback_runs': 0,
            'failed_runs': 0,
            'total_processing_time': 0.0,
            'average_processing_time': 0.0,
        }

    async def summarize(
        self,
        tasks: Iterable[TrackedTask],
        similarity_threshold: Optional[float] = None,
        on_progress: Optional[Callable[[str], None]] = None
    ) -> List[SummaryGroup]:
        """
        Summarize a snapshot of tasks.

        Args:
            tasks: Tracked tasks; they are read, never modified
            similarity_threshold: Dedupe threshold, defaults to the configured one
            on_progress: Receives "<message> (<percentage>%)" status strings

        Returns:
            Ordered summary groups; empty for empty input or total failure
        """
        tasks = list(tasks)
        if not tasks:
            return []

        if similarity_threshold is None:
            similarity_threshold = self.settings.summarization.similarity_threshold

        start_time = time.time()
        status = 'failed'
        progress, debounced = self._create_progress_reporter(on_progress)

        try:
            progress.report('init')

            try:
                result = await self._run_enhanced(tasks, similarity_threshold, progress)
                status = 'success'
            except Exception as e:
                self.logger.error(f"Enhanced summarization failed, falling back to title grouping: {e}", exc_info=True)
                result = await self._run_fallback(tasks, progress)
                status = 'fallback'

            progress.report('done')
            self.logger.info(f"Summarized {len(tasks)} task(s) into {len(result)} group(s) ({status})")
            return result

        except Exception as e:
            self.logger.error(f"Error summarizing tasks: {e}", exc_info=True)
            if debounced:
                debounced.destroy()
            if on_progress:
                on_progress(ERROR_STATUS)
            return []

        finally:
            if debounced:
                debounced.flush()
                debounced.destroy()
            self._update_processing_metrics(time.time() - start_time, status)

    def _create_progress_reporter(self, on_progress: Optional[Callable[[str], None]]):
        progress = ProgressReporter()
        debounced = None

        if on_progress:
            debounce_ms = self.settings.progress.debounce_ms
            if debounce_ms > 0:
                debounced = DebouncedProgressReporter(on_progress, debounce_ms)
                progress.on_progress(lambda stage: debounced.report(str(stage)))
            else:
                progress.on_progress(lambda stage: on_progress(str(stage)))

        return progress, debounced

    async def _run_enhanced(
        self,
        tasks: List[TrackedTask],
        threshold: float,
        progress: ProgressReporter
    ) -> List[SummaryGroup]:
        summarization = self.settings.summarization

        # Model loading overlaps with preprocessing
        preprocessing = asyncio.ensure_future(self._preprocess(tasks, progress))
        try:
            await self._load_models(progress)
            work_tasks = await preprocessing
        finally:
            preprocessing.cancel()

        if not work_tasks:
            return []

        grouper = TitleGrouper(
            summarization.grouping_strategy,
            embedder=self.embedder,
            classifier=self.title_classifier,
            threshold=summarization.title_similarity_threshold
        )
        parser = DescriptionParser(self.sentence_validator if summarization.validate_segments else None)

        progress.report('grouping_task_titles')
        clusters = await grouper.cluster_titles(distinct_titles(work_tasks))

        progress.report('parse_task_descriptions')
        grouped = await grouper.collect_work_items(work_tasks, clusters, parser)

        progress.report('remove_similar_descriptions')
        minimized = await Deduplicator(self.embedder).dedupe(grouped, threshold)

        progress.report('finalizing')
        await yield_control()
        return format_summary_groups(minimized)

    async def _preprocess(self, tasks: List[TrackedTask], progress: ProgressReporter) -> List[ParsedTask]:
        progress.report('preprocess')
        await yield_control()
        parsed_tasks = self.normalizer.normalize(
            tasks, expand=self.settings.summarization.expand_abbreviations
        )

        progress.report('filter_work_tasks')
        await yield_control()
        work_tasks = self.work_filter.filter(parsed_tasks)
        self.logger.info(f"{len(work_tasks)} of {len(parsed_tasks)} task(s) kept as work")
        return work_tasks

    async def _load_models(self, progress: ProgressReporter):
        progress.report('loading_embedding_model')

        loads = [self.embedder.load()]
        if self.settings.summarization.grouping_strategy == 'classifier':
            loads.append(self.title_classifier.load())
        if self.settings.summarization.validate_segments:
            loads.append(self.sentence_validator.load())

        await asyncio.gather(*loads)

    async def _run_fallback(self, tasks: List[TrackedTask], progress: ProgressReporter) -> List[SummaryGroup]:
        """Exact-title grouping with no model calls."""
        parsed_tasks = self.normalizer.normalize(
            tasks, expand=self.settings.summarization.expand_abbreviations
        )
        work_tasks = self.work_filter.filter(parsed_tasks)

        grouped = await group_by_exact_title(work_tasks, DescriptionParser())

        progress.report('finalizing')
        return format_summary_groups(dedupe_exact(grouped))

    def _update_processing_metrics(self, processing_time: float, status: str):
        self.metrics['total_runs'] += 1
        self.metrics['total_processing_time'] += processing_time

        if status == 'success':
            self.metrics['successful_runs'] += 1
        elif status == 'fallback':
            self.metrics['fallback_runs'] += 1
        else:
            self.metrics['failed_runs'] += 1

        total = self.metrics['total_runs']
        self.metrics['average_processing_time'] = self.metrics['total_processing_time'] / total

    def get_agent_status(self) -> Dict[str, Any]:
        """Get current agent metrics."""
        status = {
            'metrics': self.metrics.copy(),
            'grouping_strategy': self.settings.summarization.grouping_strategy,
        }
        status['metrics']['average_processing_time'] = round(status['metrics']['average_processing_time'], 2)
        return status


async def summarize_tasks(
    tasks: Iterable[TrackedTask],
    similarity_threshold: float = 0.7,
    on_progress: Optional[Callable[[str], None]] = None,
    settings: Optional[Settings] = None
) -> List[SummaryGroup]:
    """Summarize tasks with a one-off agent built from settings."""
    agent = TaskSummaryAgent(settings)
    return await agent.summarize(tasks, similarity_threshold, on_progress)
