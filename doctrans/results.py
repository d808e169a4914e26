#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Translation outcomes: per-phase accumulation, per-job results and batch totals.
"""

from dataclasses import dataclass, field, replace
from typing import Dict, Optional

from .front_matter import format_field_block
from .jobs import TranslationJob


@dataclass(frozen=True)
class TranslationResult:
    """Final outcome of one job"""
    job: TranslationJob
    translated_content: Optional[str]
    success: bool
    error_message: Optional[str] = None
    input_tokens: int = 0
    output_tokens: int = 0
    elapsed_ms: int = 0

    @classmethod
    def succeeded(cls, job: TranslationJob, content: str, input_tokens: int,
                  output_tokens: int, elapsed_ms: int) -> "TranslationResult":
        return cls(job, content, True, None, input_tokens, output_tokens, elapsed_ms)

    @classmethod
    def failed(cls, job: TranslationJob, error_message: str, elapsed_ms: int) -> "TranslationResult":
        return cls(job, None, False, error_message, 0, 0, elapsed_ms)

    @property
    def job_type(self) -> str:
        return self.job.job_type


@dataclass(frozen=True)
class PhaseResult:
    """
    Accumulator threaded through the translation phases.

    Every builder returns a new instance; token counts and elapsed time add
    up across phases and retry attempts.
    """
    job: TranslationJob
    translated_fields: Dict[str, str] = field(default_factory=dict)
    translated_body: Optional[str] = None
    input_tokens: int = 0
    output_tokens: int = 0
    elapsed_ms: int = 0
    success: bool = True
    error_message: Optional[str] = None

    @classmethod
    def initial(cls, job: TranslationJob) -> "PhaseResult":
        return cls(job=job)

    def with_front_matter(self, fields: Dict[str, str], input_tokens: int,
                          output_tokens: int, elapsed_ms: int) -> "PhaseResult":
        return replace(
            self,
            translated_fields=dict(fields),
            input_tokens=self.input_tokens + input_tokens,
            output_tokens=self.output_tokens + output_tokens,
            elapsed_ms=self.elapsed_ms + elapsed_ms,
            success=True,
            error_message=None,
        )

    def with_body(self, body: str, input_tokens: int, output_tokens: int,
                  elapsed_ms: int) -> "PhaseResult":
        if body is None:
            raise TypeError("body must not be None")
        return replace(
            self,
            translated_body=body,
            input_tokens=self.input_tokens + input_tokens,
            output_tokens=self.output_tokens + output_tokens,
            elapsed_ms=self.elapsed_ms + elapsed_ms,
            success=True,
            error_message=None,
        )

    def with_failure(self, phase: str, message: str, elapsed_ms: int,
                     input_tokens: int = 0, output_tokens: int = 0) -> "PhaseResult":
        return replace(
            self,
            input_tokens=self.input_tokens + input_tokens,
            output_tokens=self.output_tokens + output_tokens,
            elapsed_ms=self.elapsed_ms + elapsed_ms,
            success=False,
            error_message=f"[{phase}] {message}",
        )

    def combined_content(self) -> str:
        """Field marker blocks followed by the body, trimmed."""
        parts = [format_field_block(name, value) for name, value in self.translated_fields.items()]
        if self.translated_body is not None:
            parts.append(self.translated_body)
        return "".join(parts).strip()

    def to_translation_result(self) -> TranslationResult:
        if not self.success:
            return TranslationResult.failed(self.job, self.error_message or "", self.elapsed_ms)
        return TranslationResult.succeeded(
            self.job, self.combined_content(), self.input_tokens,
            self.output_tokens, self.elapsed_ms,
        )


@dataclass(frozen=True)
class TranslationSummary:
    """
    Batch totals. `empty()` is the identity and `add()` is associative and
    commutative, so partial summaries can be combined in any order.

    Cancelled jobs are also counted in `failed_count`.
    """
    success_count: int = 0
    failed_count: int = 0
    skipped_count: int = 0
    cancelled_count: int = 0
    input_tokens: int = 0
    output_tokens: int = 0

    @classmethod
    def empty(cls) -> "TranslationSummary":
        return cls()

    def add(self, other: "TranslationSummary") -> "TranslationSummary":
        return TranslationSummary(
            success_count=self.success_count + other.success_count,
            failed_count=self.failed_count + other.failed_count,
            skipped_count=self.skipped_count + other.skipped_count,
            cancelled_count=self.cancelled_count + other.cancelled_count,
            input_tokens=self.input_tokens + other.input_tokens,
            output_tokens=self.output_tokens + other.output_tokens,
        )

    def __add__(self, other: "TranslationSummary") -> "TranslationSummary":
        return self.add(other)

    def with_success(self, input_tokens: int = 0, output_tokens: int = 0) -> "TranslationSummary":
        return replace(
            self,
            success_count=self.success_count + 1,
            input_tokens=self.input_tokens + input_tokens,
            output_tokens=self.output_tokens + output_tokens,
        )

    def with_failure(self) -> "TranslationSummary":
        return replace(self, failed_count=self.failed_count + 1)

    def with_skipped(self) -> "TranslationSummary":
        return replace(self, skipped_count=self.skipped_count + 1)

    def with_cancelled(self) -> "TranslationSummary":
        return replace(
            self,
            failed_count=self.failed_count + 1,
            cancelled_count=self.cancelled_count + 1,
        )

    @property
    def total_count(self) -> int:
        return self.success_count + self.failed_count + self.skipped_count

    @property
    def is_all_successful(self) -> bool:
        return self.failed_count == 0

    @property
    def has_failures(self) -> bool:
        return self.failed_count > 0
