#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Translator - Phase pipeline that turns one TranslationJob into a TranslationResult.

Phases run strictly in order and stop at the first failure:
    1. FRONT_MATTER  translate configured front matter fields (skipped when none)
    2. BODY          new documents, whole body or chunk by chunk (BODY_CHUNK_<n>)
       BODY_DIFF     incremental updates, the model answers with a unified diff
    3. assembly      field blocks + body, see PhaseResult.combined_content()

Only UnrecoverableLLMError leaves translate(); every other problem becomes a
failed result tagged with the phase it happened in.
"""

import time
from typing import List, Optional, Tuple

from ai_providers.base import AIMessage
from ai_providers.errors import UnrecoverableLLMError
from config.constants import (
    PHASE_BODY,
    PHASE_BODY_CHUNK_PREFIX,
    PHASE_BODY_DIFF,
    PHASE_FRONT_MATTER,
)
from config.logging_config import get_logger

from .chunker import DocumentChunk, DocumentSplitter
from .diff import DiffApplicationError, DiffParseError, UnifiedDiffApplicator, UnifiedDiffParser
from .front_matter import format_fields_for_prompt, parse_translated_fields
from .jobs import (
    IncrementalJob,
    NewJob,
    TEMPLATE_FRONT_MATTER_SYSTEM,
    TEMPLATE_FRONT_MATTER_USER,
    TranslationJob,
)
from .prompts import PromptLoader
from .results import PhaseResult, TranslationResult

logger = get_logger(__name__)


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)


class Translator:
    """
    Runs the translation protocol for single jobs.

    One instance is shared by all concurrent jobs of a batch; it keeps only
    cumulative token counters.

    Usage:
        translator = Translator(client, PromptLoader())
        result = await translator.translate(job)
    """

    def __init__(
        self,
        llm_client,
        prompt_loader: Optional[PromptLoader] = None,
        splitter: Optional[DocumentSplitter] = None,
    ):
        """
        Args:
            llm_client: Object with ``async chat(messages, system_prompt)``
                (normally ai_providers.UnifiedLLMClient)
            prompt_loader: Template source, built-in templates by default
            splitter: Chunker for large new documents
        """
        self.llm_client = llm_client
        self.prompt_loader = prompt_loader or PromptLoader()
        self.splitter = splitter or DocumentSplitter()
        self.diff_parser = UnifiedDiffParser()
        self.diff_applicator = UnifiedDiffApplicator()
        self.total_input_tokens = 0
        self.total_output_tokens = 0

    async def translate(self, job: TranslationJob) -> TranslationResult:
        """
        Translate one job.

        Raises:
            UnrecoverableLLMError: authentication/billing failure or a client
                that was already shut down.
        """
        result = PhaseResult.initial(job)
        result = await self._translate_front_matter(result)
        if result.success:
            result = await self._translate_body(result)
        return result.to_translation_result()

    # ------------------------------------------------------------------
    # Backend call
    # ------------------------------------------------------------------

    async def _chat(self, system_prompt: str, user_prompt: str) -> Tuple[str, int, int]:
        response = await self.llm_client.chat(
            [AIMessage(role="user", content=user_prompt)],
            system_prompt=system_prompt,
        )
        input_tokens = response.input_tokens
        output_tokens = response.output_tokens
        self.total_input_tokens += input_tokens
        self.total_output_tokens += output_tokens
        return response.content or "", input_tokens, output_tokens

    # ------------------------------------------------------------------
    # Phase 1: front matter
    # ------------------------------------------------------------------

    async def _translate_front_matter(self, result: PhaseResult) -> PhaseResult:
        job = result.job
        fields = job.extracted_translatable_fields()
        if not fields:
            return result

        variables = job.common_variables()
        variables["frontMatterFields"] = format_fields_for_prompt(fields)
        system_prompt = self.prompt_loader.render(TEMPLATE_FRONT_MATTER_SYSTEM, variables)
        user_prompt = self.prompt_loader.render(TEMPLATE_FRONT_MATTER_USER, variables)

        start = time.monotonic()
        try:
            text, input_tokens, output_tokens = await self._chat(system_prompt, user_prompt)
            translated = parse_translated_fields(text, fields)
        except UnrecoverableLLMError:
            raise
        except Exception as e:
            return result.with_failure(PHASE_FRONT_MATTER, str(e), _elapsed_ms(start))

        return result.with_front_matter(translated, input_tokens, output_tokens, _elapsed_ms(start))

    # ------------------------------------------------------------------
    # Phase 2: body
    # ------------------------------------------------------------------

    async def _translate_body(self, result: PhaseResult) -> PhaseResult:
        job = result.job
        if isinstance(job, IncrementalJob):
            return await self._translate_diff_body(result, job)
        if isinstance(job, NewJob):
            body = job.source_body
            chunks = self.splitter.split(body)
            if len(chunks) > 1:
                return await self._translate_chunked_body(result, job, chunks)
            if self.splitter.needs_split(body):
                logger.warning(
                    f"Large document without headings sent as a single request: {job.source_file}"
                )
            return await self._translate_single_body(result, job)
        raise TypeError(f"Unsupported job type: {type(job).__name__}")

    def _job_prompts(self, job: TranslationJob) -> Tuple[str, str]:
        variables = job.prompt_variables()
        return (
            self.prompt_loader.render(job.system_template, variables),
            self.prompt_loader.render(job.user_template, variables),
        )

    async def _translate_single_body(self, result: PhaseResult, job: NewJob) -> PhaseResult:
        system_prompt, user_prompt = self._job_prompts(job)
        start = time.monotonic()
        try:
            text, input_tokens, output_tokens = await self._chat(system_prompt, user_prompt)
        except UnrecoverableLLMError:
            raise
        except Exception as e:
            return result.with_failure(PHASE_BODY, str(e), _elapsed_ms(start))
        return result.with_body(text, input_tokens, output_tokens, _elapsed_ms(start))

    async def _translate_chunked_body(self, result: PhaseResult, job: NewJob,
                                      chunks: List[DocumentChunk]) -> PhaseResult:
        logger.debug(f"Translating {job.source_file} in {len(chunks)} chunks")
        system_prompt = self.prompt_loader.render(job.system_template, job.prompt_variables())

        translated = ""
        input_total = output_total = elapsed_total = 0
        for chunk in chunks:
            user_prompt = self.prompt_loader.render(job.user_template, job.chunk_variables(chunk.content))
            start = time.monotonic()
            try:
                text, input_tokens, output_tokens = await self._chat(system_prompt, user_prompt)
            except UnrecoverableLLMError:
                raise
            except Exception as e:
                return result.with_failure(
                    f"{PHASE_BODY_CHUNK_PREFIX}{chunk.index}", str(e),
                    elapsed_total + _elapsed_ms(start),
                )
            elapsed_total += _elapsed_ms(start)
            input_total += input_tokens
            output_total += output_tokens
            if translated and not translated.endswith("\n"):
                translated += "\n\n"
            translated += text

        return result.with_body(translated, input_total, output_total, elapsed_total)

    async def _translate_diff_body(self, result: PhaseResult, job: IncrementalJob) -> PhaseResult:
        system_prompt, user_prompt = self._job_prompts(job)
        start = time.monotonic()
        try:
            text, input_tokens, output_tokens = await self._chat(system_prompt, user_prompt)
        except UnrecoverableLLMError:
            raise
        except Exception as e:
            return result.with_failure(PHASE_BODY_DIFF, str(e), _elapsed_ms(start))
        elapsed = _elapsed_ms(start)

        try:
            body = self._apply_diff_response(job, text)
        except (DiffParseError, DiffApplicationError) as first_error:
            logger.debug(f"Diff for {job.source_file} rejected, retrying: {first_error}")
            return await self._retry_diff_body(
                result, job, system_prompt, text, first_error,
                input_tokens, output_tokens, elapsed,
            )
        return result.with_body(body, input_tokens, output_tokens, elapsed)

    async def _retry_diff_body(self, result: PhaseResult, job: IncrementalJob,
                               system_prompt: str, invalid_response: str,
                               first_error: Exception, first_input: int,
                               first_output: int, first_elapsed: int) -> PhaseResult:
        retry_prompt = self.prompt_loader.render(
            job.retry_template, job.retry_variables(invalid_response, str(first_error))
        )
        start = time.monotonic()
        try:
            text, input_tokens, output_tokens = await self._chat(system_prompt, retry_prompt)
        except UnrecoverableLLMError:
            raise
        except Exception as e:
            return result.with_failure(
                PHASE_BODY_DIFF, str(e), first_elapsed + _elapsed_ms(start),
                first_input, first_output,
            )
        elapsed = first_elapsed + _elapsed_ms(start)
        input_tokens += first_input
        output_tokens += first_output

        try:
            body = self._apply_diff_response(job, text)
        except (DiffParseError, DiffApplicationError) as retry_error:
            return result.with_failure(
                PHASE_BODY_DIFF,
                f"Diff translation failed after retry. First error: {first_error}; "
                f"Retry error: {retry_error}",
                elapsed, input_tokens, output_tokens,
            )
        return result.with_body(body, input_tokens, output_tokens, elapsed)

    def _apply_diff_response(self, job: IncrementalJob, response: str) -> str:
        """
        Existing translation body with the model's diff applied.

        A blank response, or one without hunks, keeps the body unchanged.
        """
        existing_body = job.existing_translation_body
        if not response.strip():
            return existing_body
        diff = self.diff_parser.parse(response)
        if diff.is_empty:
            return existing_body
        return self.diff_applicator.apply(existing_body, diff)
