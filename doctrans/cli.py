#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
doctrans CLI - Incremental Markdown translation driven by git history

Usage:
    doctrans show-config
    doctrans translate --target de:docs/de --target fr:docs/fr --source-dir docs
    doctrans translate --target de:docs/de --dry-run
    python -m doctrans translate --provider anthropic --model claude-sonnet-4-20250514 ...

Every option overrides the corresponding setting from the environment / .env.
"""

import sys
import asyncio
import argparse
import logging
from pathlib import Path
from typing import List, Optional

from ai_providers import UnifiedLLMClient, create_provider_from_settings
from config.logging_config import (
    disable_file_logging,
    enable_file_logging,
    get_logger,
    set_console_level,
)
from config.settings import Settings, settings as default_settings

from .batch import TranslationExecutor
from .chunker import DocumentSplitter
from .classifier import JobClassifier, Skip, SkipReason
from .git_service import GitError, GitService
from .jobs import IncrementalJob, TranslationJob
from .locale import TargetLocale
from .prompts import PromptLoader
from .results import TranslationSummary
from .translator import Translator
from .traverser import Traverser
from .writer import Writer

logger = get_logger(__name__)


def _split_list(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def settings_from_args(args, base: Settings) -> Settings:
    """Settings with every given command line option applied."""
    overrides = {}
    if getattr(args, "source_dir", None):
        overrides["source_dir"] = Path(args.source_dir)
    if getattr(args, "target", None):
        overrides["targets"] = list(args.target)
    if getattr(args, "provider", None):
        overrides["llm_provider"] = args.provider
    if getattr(args, "model", None):
        overrides["llm_model"] = args.model
    if getattr(args, "url", None):
        overrides["llm_url"] = args.url
    if getattr(args, "parallelism", None) is not None:
        overrides["parallelism"] = args.parallelism
    if getattr(args, "limit", None) is not None:
        overrides["limit"] = args.limit
    if getattr(args, "dry_run", False):
        overrides["dry_run"] = True
    if getattr(args, "fields", None):
        overrides["translatable_front_matter_fields"] = _split_list(args.fields)
    if getattr(args, "exclude", None):
        overrides["excluded_file_patterns"] = list(args.exclude)
    if getattr(args, "file_regex", None):
        overrides["file_regex"] = args.file_regex
    if getattr(args, "prompt_dir", None):
        overrides["prompt_dir"] = Path(args.prompt_dir)
    if getattr(args, "no_progress", False):
        overrides["show_progress"] = False
    return base.model_copy(update=overrides)


# =============================================================================
# COMMANDS
# =============================================================================

def cmd_show_config(args, settings: Settings) -> int:
    """Print the effective configuration"""
    print("doctrans configuration:")
    print(f" - source_dir: {settings.source_dir}")
    print(f" - file_regex: {settings.file_regex}")
    if settings.excluded_file_patterns:
        print(" - excluded_file_patterns:")
        for pattern in settings.excluded_file_patterns:
            print(f"   - {pattern}")
    else:
        print(" - excluded_file_patterns: <none>")
    if settings.targets:
        print(" - targets:")
        for target in settings.targets:
            print(f"   - {target}")
    else:
        print(" - targets: <none>")
    fields = ", ".join(settings.translatable_front_matter_fields) or "<none>"
    print(f" - translatable_front_matter_fields: {fields}")
    print(f" - llm_provider: {settings.llm_provider}")
    print(f" - llm_model: {settings.llm_model}")
    print(f" - llm_url: {settings.llm_url or '<default>'}")
    print(f" - llm_token: {'<set>' if settings.llm_token else '<none>'}")
    print(f" - parallelism: {settings.parallelism}")
    print(f" - limit: {'<none>' if settings.limit == sys.maxsize else settings.limit}")
    print(f" - dry_run: {settings.dry_run}")
    print(f" - chunk_target_size: {settings.chunk_target_size} bytes (+/- {settings.chunk_tolerance:.0%})")
    print(f" - prompt_dir: {settings.prompt_dir or '<built-in>'}")
    print(f" - log_dir: {settings.log_dir}")
    return 0


def cmd_translate(args, settings: Settings) -> int:
    """Classify all documents and translate (or only report with --dry-run)"""
    try:
        settings.validate_for_translation()
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    if not settings.dry_run:
        try:
            log_file = enable_file_logging(settings.log_dir)
            logger.debug(f"Logging to {log_file}")
        except OSError as e:
            logger.warning(f"File logging disabled, cannot use {settings.log_dir}: {e}")
    try:
        return asyncio.run(run_translation(settings))
    finally:
        disable_file_logging()


async def run_translation(settings: Settings) -> int:
    """Translate every configured target; returns the process exit code."""
    source_dir = Path(settings.source_dir).resolve()
    if not source_dir.is_dir():
        logger.error(f"Source directory does not exist or is not a directory: {source_dir}")
        return 1

    try:
        git_root = GitService.find_repo_root(source_dir)
    except GitError as e:
        logger.error(f"Source directory is not inside a git repository: {e}")
        return 1
    git_service = GitService(git_root)

    executor = None
    if not settings.dry_run:
        try:
            provider = create_provider_from_settings(settings)
        except ValueError as e:
            logger.error(f"Invalid configuration: {e}")
            return 1
        llm_client = UnifiedLLMClient(provider)
        translator = Translator(
            llm_client,
            PromptLoader(settings.prompt_dir),
            DocumentSplitter(settings.chunk_target_size, settings.chunk_tolerance),
        )
        executor = TranslationExecutor(
            translator,
            llm_client=llm_client,
            writer=Writer(),
            source_dir=source_dir,
            parallelism=settings.parallelism,
            show_progress=settings.show_progress,
        )

    failed = False
    try:
        for target in settings.parsed_targets():
            locale = TargetLocale.from_tag(target.locale)
            target_dir = Path(target.target_dir).resolve()
            logger.info(f"=== Processing target: {locale} -> {target_dir} ===")

            classifier = JobClassifier(git_service, source_dir)
            jobs, skipped, errors = collect_jobs(classifier, settings, source_dir, target_dir, locale)

            if settings.dry_run:
                report_dry_run(jobs, skipped, errors)
                failed = failed or errors > 0
                continue

            logger.info(f"Executing {len(jobs)} translations with parallelism {settings.parallelism}...")
            summary = await executor.execute_all(jobs)
            report_summary(summary, skipped)
            failed = failed or errors > 0 or summary.has_failures
            if executor.llm_client.has_permanent_failure:
                logger.error("Remaining targets skipped due to permanent LLM failure")
                break
    finally:
        if executor is not None:
            await executor.shutdown()

    return 1 if failed else 0


def collect_jobs(classifier: JobClassifier, settings: Settings, source_dir: Path,
                 target_dir: Path, locale: TargetLocale):
    """
    Classify traversed documents until `settings.limit` jobs were collected.

    Returns:
        (jobs, skipped count, error count)
    """
    jobs: List[TranslationJob] = []
    skipped = 0
    errors = 0
    traverser = Traverser(source_dir, settings.file_regex, settings.excluded_file_patterns)

    for source in traverser.traverse():
        if len(jobs) >= settings.limit:
            break
        relative = classifier.relative_path(source.path)
        try:
            outcome = classifier.classify(
                source.path,
                source.content,
                target_dir,
                locale,
                instructions=source.instructions,
                translatable_fields=settings.translatable_front_matter_fields,
            )
        except (GitError, OSError) as e:
            errors += 1
            logger.error(f"Error processing file {source.path}: {e}")
            continue

        if isinstance(outcome, Skip):
            skipped += 1
            if settings.dry_run and outcome.reason is SkipReason.UP_TO_DATE:
                classifier.report_up_to_date(relative)
            continue

        jobs.append(outcome)
        if settings.dry_run:
            classifier.report_job(outcome, relative)

    return jobs, skipped, errors


def report_dry_run(jobs: List[TranslationJob], skipped: int, errors: int) -> None:
    updates = sum(1 for job in jobs if isinstance(job, IncrementalJob))
    logger.info("--- Dry-run Summary ---")
    logger.info(f"New files: {len(jobs) - updates}")
    logger.info(f"Files to update: {updates}")
    logger.info(f"Skipped: {skipped}")
    if errors > 0:
        logger.info(f"Errors: {errors}")


def report_summary(summary: TranslationSummary, skipped: int) -> None:
    logger.info("--- Translation Summary ---")
    logger.info(f"Successful: {summary.success_count}")
    logger.info(f"Failed: {summary.failed_count}")
    if summary.cancelled_count > 0:
        logger.info(f"Cancelled: {summary.cancelled_count}")
    logger.info(f"Skipped: {skipped}")
    logger.info(f"Input tokens: {summary.input_tokens}")
    logger.info(f"Output tokens: {summary.output_tokens}")


# =============================================================================
# ENTRY POINT
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="doctrans",
        description="Incremental LLM translation of Markdown documentation",
    )
    parser.add_argument('--verbose', '-v', action='store_true', help='Show debug output')
    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    subparsers.add_parser('show-config', help='Show the effective configuration')

    translate_parser = subparsers.add_parser('translate', help='Translate changed documents')
    translate_parser.add_argument('--source-dir', '-s', help='Directory with source documents')
    translate_parser.add_argument('--target', '-t', action='append', metavar='LOCALE:DIR',
                                  help='Target locale and directory (repeatable)')
    translate_parser.add_argument('--provider', choices=['openai', 'anthropic'],
                                  help='LLM provider')
    translate_parser.add_argument('--model', '-m', help='Model name')
    translate_parser.add_argument('--url', help='Custom LLM endpoint (OpenAI-compatible servers)')
    translate_parser.add_argument('--parallelism', '-p', type=int, help='Parallel translations')
    translate_parser.add_argument('--limit', type=int, help='Maximum number of jobs per target')
    translate_parser.add_argument('--dry-run', action='store_true',
                                  help='Only report what would be translated')
    translate_parser.add_argument('--fields', help='Comma separated front matter fields to translate')
    translate_parser.add_argument('--exclude', action='append', metavar='REGEX',
                                  help='Exclude paths matching REGEX (repeatable)')
    translate_parser.add_argument('--file-regex', help='Regex selecting source files')
    translate_parser.add_argument('--prompt-dir', help='Directory with prompt template overrides')
    translate_parser.add_argument('--no-progress', action='store_true', help='Hide the progress bar')

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    if args.verbose:
        set_console_level(logging.DEBUG)

    try:
        settings = settings_from_args(args, default_settings)
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    # Route to command handlers
    commands = {
        'show-config': cmd_show_config,
        'translate': cmd_translate,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args, settings)
    else:
        print(f"Unknown command: {args.command}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
