#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Settings - Centralized configuration management
"""

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional
from pydantic_settings import BaseSettings

from .constants import (
    BATCH_PARALLEL_WORKERS,
    CHUNK_DEFAULT_TARGET_SIZE,
    CHUNK_SIZE_TOLERANCE,
    DEFAULT_FILE_REGEX,
    DEFAULT_LOG_DIR,
    DEFAULT_MODEL,
    DEFAULT_PROVIDER,
    SUPPORTED_PROVIDERS,
    TRANSLATION_MAX_RETRIES,
    TRANSLATION_MAX_TOKENS,
    TRANSLATION_TEMPERATURE,
    TRANSLATION_TIMEOUT_SECONDS,
)


# Base directory
BASE_DIR = Path(__file__).resolve().parent.parent


@dataclass(frozen=True)
class TargetConfig:
    """One output locale and the directory its translations live in"""
    locale: str
    target_dir: Path


class Settings(BaseSettings):
    """Application settings"""

    # ========== LLM Backend ==========
    llm_provider: str = DEFAULT_PROVIDER  # openai | anthropic
    llm_url: Optional[str] = None  # Custom endpoint (OpenAI-compatible servers, proxies)
    llm_token: str = ""
    llm_model: str = DEFAULT_MODEL
    llm_temperature: float = TRANSLATION_TEMPERATURE
    llm_max_tokens: int = TRANSLATION_MAX_TOKENS
    llm_timeout_seconds: float = TRANSLATION_TIMEOUT_SECONDS
    llm_max_retries: int = TRANSLATION_MAX_RETRIES

    # ========== Sources & Targets ==========
    source_dir: Path = Path(".")
    file_regex: str = DEFAULT_FILE_REGEX
    excluded_file_patterns: List[str] = []
    targets: List[str] = []  # "<locale>:<target dir>", e.g. "de:docs/de"
    translatable_front_matter_fields: List[str] = []

    # ========== Execution ==========
    parallelism: int = BATCH_PARALLEL_WORKERS
    limit: int = sys.maxsize
    dry_run: bool = False
    show_progress: bool = True

    # ========== Chunking ==========
    chunk_target_size: int = CHUNK_DEFAULT_TARGET_SIZE
    chunk_tolerance: float = CHUNK_SIZE_TOLERANCE

    # ========== Prompts ==========
    prompt_dir: Optional[Path] = None  # Directory with <template>.txt overrides

    # ========== Logging ==========
    log_dir: Path = Path(DEFAULT_LOG_DIR)  # "~" is expanded when file logging starts

    class Config:
        env_file = str(BASE_DIR / ".env")
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"  # Allow extra fields from .env that aren't defined in model

    def parsed_targets(self) -> List[TargetConfig]:
        """Parse "<locale>:<dir>" entries into TargetConfig objects"""
        parsed = []
        for entry in self.targets:
            locale, sep, target_dir = entry.partition(":")
            if not sep or not locale.strip() or not target_dir.strip():
                raise ValueError(f"Invalid target '{entry}', expected <locale>:<target dir>")
            parsed.append(TargetConfig(locale=locale.strip(), target_dir=Path(target_dir.strip())))
        return parsed

    def validate_for_translation(self) -> None:
        """Reject settings that cannot drive a translation run"""
        if self.llm_provider.lower() not in SUPPORTED_PROVIDERS:
            raise ValueError(
                f"Unsupported provider: {self.llm_provider} "
                f"(expected one of {', '.join(SUPPORTED_PROVIDERS)})"
            )
        if self.parallelism < 1:
            raise ValueError(f"parallelism must be positive: {self.parallelism}")
        if self.limit < 0:
            raise ValueError(f"limit must not be negative: {self.limit}")
        if self.chunk_target_size <= 0:
            raise ValueError(f"chunk_target_size must be positive: {self.chunk_target_size}")
        if not 0 < self.chunk_tolerance < 1:
            raise ValueError(f"chunk_tolerance must be between 0 and 1: {self.chunk_tolerance}")
        if not self.targets:
            raise ValueError("At least one target (<locale>:<target dir>) is required")
        self.parsed_targets()


# Global settings instance
settings = Settings()
