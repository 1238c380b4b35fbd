"""Root pytest configuration and fixtures.

This module provides:
- Environment setup (loads .env)
- Auto-skip for tests that need a real LLM API key
- MockLLMBackend for deterministic pipeline tests
- Shared goal, profile and specification fixtures
"""

from __future__ import annotations

import json
import os
import threading
from typing import Any, Generator

import pytest
from dotenv import load_dotenv

from genui.config import get_available_llm_providers
from genui.layout import Specification
from genui.llm.backend import GenerationConfig, GenerationResult, LLMBackend
from genui.schema import TaskGoal, UserProfile

# Load environment variables from .env file
load_dotenv()


# =============================================================================
# Collection Hooks
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]):
    """Auto-skip tests marked ``llm`` when no provider key is configured."""
    if get_available_llm_providers():
        return

    skip_llm = pytest.mark.skip(reason="No LLM API key configured")
    for item in items:
        if "llm" in item.keywords:
            item.add_marker(skip_llm)


# =============================================================================
# Mock LLM Backend
# =============================================================================


class MockLLMBackend(LLMBackend):
    """Mock LLM backend for testing without API keys.

    Replies with queued responses when given, otherwise with a canned layout
    for generation prompts and a canned rubric score for evaluation prompts.
    Every call is recorded in ``calls``.

    Args:
        responses: Queued replies. A string is returned as content, an
            exception instance is raised.
        error: Raised on every call (takes precedence over responses).
    """

    MOCK_LAYOUT_JSON = """{
    "layout": {
        "id": "root",
        "type": "layout-row",
        "children": [
            {"id": "map", "type": "widget-mindmap", "title": "Idea Map", "flex": 3},
            {
                "id": "side",
                "type": "layout-col",
                "flex": 2,
                "children": [
                    {"id": "board", "type": "widget-kanban", "title": "Idea Board"},
                    {"id": "chat", "type": "widget-chat", "title": "Assistant"}
                ]
            }
        ]
    },
    "theme": "calm",
    "rationale": "A large canvas externalizes associations while the board tracks promising ideas."
}"""

    MOCK_EVALUATION_JSON = """{
    "cognitiveLoad": 30,
    "clarity": 80,
    "efficiency": 75,
    "personalizationFit": 85,
    "aestheticAppeal": 70,
    "overallScore": 78,
    "feedback": "Well matched to a spatial thinker.",
    "strengths": ["Spatial canvas", "Visible progress"],
    "improvements": ["Add an outline for drafting"],
    "detailed": {
        "cognitiveLoad": {"score": 30, "details": {"mentalDemand": 30, "temporalDemand": 25, "effort": 35}, "justification": "Low effort."},
        "clarity": {"score": 80, "details": {"visibility": 80, "recognition": 85, "consistency": 75}, "justification": "Clear."},
        "efficiency": {"score": 75, "details": {"taskCompletion": 75, "flexibility": 70, "errorPrevention": 80}, "justification": "Efficient."},
        "personalizationFit": {"score": 85, "details": {"personaAlignment": 90, "preferenceMatch": 80, "historyUtilization": 85}, "justification": "Tailored."},
        "aestheticAppeal": {"score": 70, "details": {"visualBalance": 70, "whitespace": 65, "coherence": 75}, "justification": "Balanced."}
    }
}"""

    def __init__(
        self,
        responses: list[str | Exception] | None = None,
        error: Exception | None = None,
    ):
        self.responses = list(responses or [])
        self.error = error
        self.calls: list[dict[str, Any]] = []
        self._lock = threading.Lock()

    @property
    def model_name(self) -> str:
        return "mock-model-v1"

    @property
    def provider(self) -> str:
        return "mock"

    @property
    def supports_json_mode(self) -> bool:
        return True

    @property
    def context_window(self) -> int:
        return 128000

    @property
    def generation_calls(self) -> list[dict[str, Any]]:
        return [c for c in self.calls if not self._is_evaluation(c["system_prompt"])]

    @property
    def evaluation_calls(self) -> list[dict[str, Any]]:
        return [c for c in self.calls if self._is_evaluation(c["system_prompt"])]

    @staticmethod
    def _is_evaluation(system_prompt: str | None) -> bool:
        return "HCI researcher" in (system_prompt or "")

    def generate(
        self,
        prompt: str,
        *,
        system_prompt: str | None = None,
        config: GenerationConfig | None = None,
    ) -> GenerationResult:
        """Return the next queued reply or a canned one based on the prompt."""
        with self._lock:
            self.calls.append(
                {"prompt": prompt, "system_prompt": system_prompt, "config": config}
            )
            queued = self.responses.pop(0) if self.responses else None

        if self.error is not None:
            raise self.error
        if isinstance(queued, Exception):
            raise queued

        if queued is not None:
            content = queued
        elif self._is_evaluation(system_prompt):
            content = self.MOCK_EVALUATION_JSON
        else:
            content = self.MOCK_LAYOUT_JSON

        return GenerationResult(
            content=content,
            finish_reason="stop",
            model=self.model_name,
            usage={"total_tokens": 100},
        )


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def mock_llm_backend() -> MockLLMBackend:
    """Create a mock LLM backend for testing."""
    return MockLLMBackend()


@pytest.fixture
def mock_backend_factory():
    """Build MockLLMBackend instances with custom responses."""
    return MockLLMBackend


@pytest.fixture
def preserve_env_keys() -> Generator[None, None, None]:
    """Save and restore API keys so tests can modify them safely."""
    key_names = ["OPENAI_API_KEY", "ANTHROPIC_API_KEY", "LLM_PROVIDER", "GENUI_MODEL"]
    saved_keys = {key: os.environ.get(key) for key in key_names}

    yield

    for key, value in saved_keys.items():
        if value is None:
            os.environ.pop(key, None)
        else:
            os.environ[key] = value


@pytest.fixture
def no_api_keys(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove every provider key for the duration of a test."""
    for key in ("OPENAI_API_KEY", "ANTHROPIC_API_KEY", "LLM_PROVIDER", "GENUI_MODEL"):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def task_goal() -> TaskGoal:
    """Brainstorming goal used by the built-in study cases."""
    return TaskGoal(
        description="Help me brainstorm thesis ideas about AI and cognition",
        intent="brainstorm",
    )


@pytest.fixture
def user_profile() -> UserProfile:
    """Visual writer with comfortable density."""
    return UserProfile.model_validate(
        {
            "id": "u1",
            "name": "User",
            "persona": "VisualWriter",
            "preferences": {"density": "comfortable", "showMinimap": True},
        }
    )


@pytest.fixture
def sample_specification() -> Specification:
    """Generated-style specification (matches MockLLMBackend.MOCK_LAYOUT_JSON)."""
    return Specification.model_validate(json.loads(MockLLMBackend.MOCK_LAYOUT_JSON))
