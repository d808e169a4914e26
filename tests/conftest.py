"""
Pytest configuration and shared fixtures for doctrans tests.
"""
import sys
import shutil
import asyncio
import subprocess
import tempfile
import pytest
from pathlib import Path
from typing import Callable, Generator, List, Optional, Sequence

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from ai_providers.base import AIMessage, AIProviderType, AIResponse
from ai_providers.errors import LLMShutdownError
from doctrans.locale import TargetLocale


# ============================================================================
# Fixtures: Filesystem
# ============================================================================

@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


# ============================================================================
# Fixtures: Git repository
# ============================================================================

class GitRepo:
    """Small driver for a throw-away git repository."""

    def __init__(self, path: Path):
        self.path = path

    def git(self, *args: str) -> str:
        completed = subprocess.run(
            ["git", *args],
            cwd=str(self.path),
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            check=True,
        )
        return completed.stdout.decode("utf-8")

    def write(self, relative: str, content: str) -> Path:
        file = self.path / relative
        file.parent.mkdir(parents=True, exist_ok=True)
        file.write_text(content, encoding="utf-8")
        return file

    def commit(self, message: str = "update") -> str:
        """Stage everything, commit and return the new commit hash."""
        self.git("add", "-A")
        self.git("commit", "-q", "-m", message)
        return self.git("rev-parse", "HEAD").strip()

    def commit_file(self, relative: str, content: str, message: str = "update") -> str:
        self.write(relative, content)
        return self.commit(message)


@pytest.fixture
def git_repo(temp_dir: Path) -> GitRepo:
    """Initialized git repository in a temporary directory (skipped without git)."""
    if shutil.which("git") is None:
        pytest.skip("git executable not available")
    repo = GitRepo(temp_dir.resolve())
    repo.git("init", "-q")
    repo.git("config", "user.email", "docs@example.com")
    repo.git("config", "user.name", "Docs Bot")
    repo.git("config", "commit.gpgsign", "false")
    return repo


# ============================================================================
# Fixtures: Sample Data
# ============================================================================

@pytest.fixture
def german() -> TargetLocale:
    return TargetLocale.from_tag("de")


@pytest.fixture
def sample_documents():
    """Sample Markdown documents."""
    return {
        "simple": "# Hello\n\nContent here.\n",
        "with_front_matter": (
            "---\n"
            "title: Getting started\n"
            "perex: Learn the basics\n"
            "author: Jane\n"
            "---\n"
            "# Getting started\n"
            "\n"
            "First steps.\n"
        ),
        "translated": (
            "---\n"
            "title: Erste Schritte\n"
            "commit: '{commit}'\n"
            "---\n"
            "\n"
            "# Erste Schritte\n"
            "\n"
            "Erste Schritte.\n"
        ),
    }


# ============================================================================
# Fixtures: LLM
# ============================================================================

class ScriptedLLMClient:
    """
    Stand-in for UnifiedLLMClient.

    Answers come either from a list (consumed in order; exceptions are raised)
    or from a responder callable ``(messages, system_prompt) -> str``.
    """

    def __init__(
        self,
        responses: Optional[Sequence] = None,
        responder: Optional[Callable[[List[AIMessage], Optional[str]], str]] = None,
        input_tokens: int = 10,
        output_tokens: int = 5,
    ):
        self.responses = list(responses or [])
        self.responder = responder
        self.input_tokens = input_tokens
        self.output_tokens = output_tokens
        self.calls = []
        self.failure_cause = None
        self.shutdown_signals = 0
        self.closed = False

    async def chat(self, messages, system_prompt=None) -> AIResponse:
        self.calls.append((system_prompt, list(messages)))
        # Give other jobs a chance to interleave
        await asyncio.sleep(0)
        if self.failure_cause is not None:
            raise LLMShutdownError(self.failure_cause)

        if self.responder is not None:
            answer = self.responder(messages, system_prompt)
        elif self.responses:
            answer = self.responses.pop(0)
        else:
            raise AssertionError("No scripted LLM response left")

        if isinstance(answer, BaseException):
            raise answer
        return AIResponse(
            content=answer,
            model="fake-model",
            provider=AIProviderType.OPENAI,
            usage={"input_tokens": self.input_tokens, "output_tokens": self.output_tokens},
        )

    def signal_shutdown(self, cause) -> bool:
        self.shutdown_signals += 1
        if self.failure_cause is not None:
            return False
        self.failure_cause = cause
        return True

    @property
    def has_permanent_failure(self) -> bool:
        return self.failure_cause is not None

    @property
    def user_prompts(self) -> List[str]:
        return [messages[-1].content for _, messages in self.calls]

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def scripted_llm():
    """Factory for ScriptedLLMClient instances."""
    return ScriptedLLMClient
