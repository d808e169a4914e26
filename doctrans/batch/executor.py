#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
TranslationExecutor - Runs a batch of translation jobs with bounded concurrency.

- Jobs run as asyncio tasks limited by a semaphore; each job's phases are
  awaited sequentially by the Translator.
- A finished job is written immediately so its text can be released.
- The first unrecoverable backend failure shuts the batch down: the shared
  client starts failing fast, and jobs that have not started yet are counted
  as cancelled (and failed) instead of being run.
"""

import asyncio
import threading
from pathlib import Path
from typing import List, Optional, Set

from tqdm import tqdm

from ai_providers.errors import UnrecoverableLLMError
from config.constants import BANNER_WIDTH, BATCH_PARALLEL_WORKERS, SHUTDOWN_TIMEOUT_SECONDS
from config.logging_config import get_logger

from ..jobs import TranslationJob
from ..results import TranslationResult, TranslationSummary
from ..translator import Translator
from ..writer import Writer, build_translated_document
from .progress import format_elapsed, format_progress_bar

logger = get_logger(__name__)


class BatchState:
    """
    State shared by all jobs of one batch run.

    Every mutation goes through the lock; `request_shutdown` is a
    compare-and-set where only the first caller wins and its cause is kept.
    """

    def __init__(self, total_jobs: int):
        self._lock = threading.Lock()
        self.total_jobs = total_jobs
        self._completed = 0
        self._cancelled = 0
        self._shutdown_requested = False
        self._failure_cause: Optional[BaseException] = None
        self._translated_files: Set[Path] = set()

    @property
    def completed(self) -> int:
        with self._lock:
            return self._completed

    @property
    def cancelled(self) -> int:
        with self._lock:
            return self._cancelled

    @property
    def shutdown_requested(self) -> bool:
        with self._lock:
            return self._shutdown_requested

    @property
    def failure_cause(self) -> Optional[BaseException]:
        with self._lock:
            return self._failure_cause

    @property
    def translated_files(self) -> Set[Path]:
        with self._lock:
            return set(self._translated_files)

    def increment_completed(self) -> int:
        with self._lock:
            self._completed += 1
            return self._completed

    def mark_cancelled(self) -> None:
        with self._lock:
            self._cancelled += 1

    def record_translated(self, target_file: Path) -> None:
        with self._lock:
            self._translated_files.add(target_file)

    def request_shutdown(self, cause: BaseException) -> bool:
        """Returns True only for the call that actually requested the shutdown."""
        with self._lock:
            if self._shutdown_requested:
                return False
            self._shutdown_requested = True
            self._failure_cause = cause
            return True


class TranslationExecutor:
    """
    Executes translation jobs in parallel and aggregates a TranslationSummary.

    Usage:
        executor = TranslationExecutor(translator, source_dir=Path("docs"), parallelism=4)
        summary = await executor.execute_all(jobs)
        await executor.shutdown()
    """

    def __init__(
        self,
        translator: Translator,
        llm_client=None,
        writer: Optional[Writer] = None,
        source_dir: Path = Path("."),
        parallelism: int = BATCH_PARALLEL_WORKERS,
        show_progress: bool = False,
    ):
        """
        Args:
            translator: Shared Translator
            llm_client: Client to signal on permanent failure (defaults to the translator's)
            writer: Output writer
            source_dir: Base for relative paths in log lines
            parallelism: Maximum number of jobs in flight
            show_progress: Show a tqdm progress bar
        """
        if parallelism < 1:
            raise ValueError(f"parallelism must be at least 1: {parallelism}")
        self.translator = translator
        self.llm_client = llm_client if llm_client is not None else translator.llm_client
        self.writer = writer or Writer()
        self.source_dir = Path(source_dir).resolve()
        self.parallelism = parallelism
        self.show_progress = show_progress
        self.state: Optional[BatchState] = None
        self._tasks: List[asyncio.Future] = []

    def relative_path(self, job: TranslationJob) -> Path:
        source = Path(job.source_file).resolve()
        try:
            return source.relative_to(self.source_dir)
        except ValueError:
            return source

    @property
    def successfully_translated_files(self) -> Set[Path]:
        return self.state.translated_files if self.state else set()

    async def execute_all(self, jobs: List[TranslationJob]) -> TranslationSummary:
        """Run every job and return the combined summary."""
        if not jobs:
            return TranslationSummary.empty()

        self.state = BatchState(total_jobs=len(jobs))
        semaphore = asyncio.Semaphore(self.parallelism)
        progress_bar = tqdm(
            total=len(jobs),
            desc="Translating",
            unit="file",
            disable=not self.show_progress,
        )

        try:
            self._tasks = [
                asyncio.ensure_future(self._run_job(job, semaphore, progress_bar))
                for job in jobs
            ]
            outcomes = await asyncio.gather(*self._tasks, return_exceptions=True)
        finally:
            progress_bar.close()

        summary = TranslationSummary.empty()
        for job, outcome in zip(jobs, outcomes):
            if isinstance(outcome, BaseException):
                logger.error(f"Translation task for {self.relative_path(job)} did not complete: {outcome!r}")
                summary = summary.with_failure()
            else:
                summary = summary.add(outcome)

        if self.state.shutdown_requested and self.state.cancelled > 0:
            logger.error(
                f"{self.state.cancelled} remaining translations cancelled due to permanent failure"
            )
        return summary

    async def _run_job(self, job: TranslationJob, semaphore: asyncio.Semaphore,
                       progress_bar: tqdm) -> TranslationSummary:
        async with semaphore:
            try:
                # Pending jobs are dropped once a permanent failure was seen
                if self.state.shutdown_requested:
                    self.state.mark_cancelled()
                    return TranslationSummary.empty().with_cancelled()

                logger.info(f"Translating: {self.relative_path(job)} -> {job.locale}")
                try:
                    result = await self.translator.translate(job)
                except UnrecoverableLLMError as e:
                    self._handle_permanent_failure(e, job)
                    return TranslationSummary.empty().with_failure()
                except Exception as e:
                    completed = self.state.increment_completed()
                    logger.error(
                        f"{format_progress_bar(completed, self.state.total_jobs)} [{job.job_type}] "
                        f"Translation failed for {self.relative_path(job)}: {e}"
                    )
                    return TranslationSummary.empty().with_failure()
                return self._process_result(result)
            finally:
                progress_bar.update(1)

    def _handle_permanent_failure(self, error: UnrecoverableLLMError, job: TranslationJob) -> None:
        if self.state.request_shutdown(error):
            logger.error("")
            logger.error("=" * BANNER_WIDTH)
            logger.error("PERMANENT LLM ERROR - Shutting down all translations")
            logger.error(f"Error: {type(error).__name__} - {error}")
            logger.error("=" * BANNER_WIDTH)
            logger.error("")
            self.llm_client.signal_shutdown(error)
        else:
            logger.debug(f"Permanent failure after shutdown for {self.relative_path(job)}: {error}")
        self.state.increment_completed()

    def _process_result(self, result: TranslationResult) -> TranslationSummary:
        job = result.job
        relative = self.relative_path(job)
        completed = self.state.increment_completed()
        progress = format_progress_bar(completed, self.state.total_jobs)
        elapsed = format_elapsed(result.elapsed_ms)

        if not result.success:
            logger.error(
                f"{progress} [{job.job_type}] Translation failed for {relative} ({elapsed}): "
                f"{result.error_message}"
            )
            return TranslationSummary.empty().with_failure()

        try:
            document = build_translated_document(job, result.translated_content)
            self.writer.write(document, job.target_file)
        except (OSError, ValueError) as e:
            logger.error(f"{progress} [{job.job_type}] Failed to write {relative}: {e}")
            return TranslationSummary.empty().with_failure()

        self.state.record_translated(Path(job.target_file))
        logger.info(f"{progress} [{job.job_type}] {relative} -> {job.locale} ({elapsed})")
        return TranslationSummary.empty().with_success(result.input_tokens, result.output_tokens)

    async def shutdown(self, timeout: float = SHUTDOWN_TIMEOUT_SECONDS) -> None:
        """Wait (bounded) for in-flight jobs, cancel stragglers and close the client."""
        pending = [task for task in self._tasks if not task.done()]
        if pending:
            _, still_running = await asyncio.wait(pending, timeout=timeout)
            if still_running:
                logger.warning("Executor did not terminate in time, forcing shutdown")
                for task in still_running:
                    task.cancel()
                await asyncio.gather(*still_running, return_exceptions=True)
        self._tasks = []
        close = getattr(self.llm_client, "close", None)
        if close is not None:
            await close()
