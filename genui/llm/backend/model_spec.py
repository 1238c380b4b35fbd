"""Registry of the models the generator and evaluator can use."""

from dataclasses import dataclass, field
from enum import Enum


class LLMCapability(Enum):
    """Request features a model may accept."""

    JSON_MODE = "json_mode"  # response_format json_object
    SEED = "seed"


class LLMProviderType(Enum):
    """Available LLM backend providers."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"


@dataclass(frozen=True)
class LLMSpec:
    """One model entry.

    Attributes:
        name: Model identifier sent to the provider.
        provider: Backend provider type.
        context_window: Maximum context size in tokens.
        max_output_tokens: Maximum generation tokens.
        capabilities: Supported request features.
        description: Short label for ``python . models``.
    """

    name: str
    provider: LLMProviderType
    context_window: int
    max_output_tokens: int
    capabilities: frozenset[LLMCapability] = field(default_factory=frozenset)
    description: str = ""

    def supports(self, capability: LLMCapability) -> bool:
        return capability in self.capabilities


def _gpt(name: str, context_window: int, max_output_tokens: int, description: str) -> LLMSpec:
    return LLMSpec(
        name=name,
        provider=LLMProviderType.OPENAI,
        context_window=context_window,
        max_output_tokens=max_output_tokens,
        capabilities=frozenset({LLMCapability.JSON_MODE, LLMCapability.SEED}),
        description=description,
    )


def _claude(name: str, description: str) -> LLMSpec:
    return LLMSpec(
        name=name,
        provider=LLMProviderType.ANTHROPIC,
        context_window=200_000,
        max_output_tokens=64_000,
        description=description,
    )


class LLMModel(Enum):
    """Known models. Values are LLMSpec entries."""

    GPT_4O = _gpt("gpt-4o", 128_000, 16_384, "default for generation and judging")
    GPT_4O_MINI = _gpt("gpt-4o-mini", 128_000, 16_384, "cheaper GPT-4o for batch runs")
    GPT_4_1 = _gpt("gpt-4.1", 1_047_576, 32_768, "long-context GPT-4.1")
    GPT_4_1_MINI = _gpt("gpt-4.1-mini", 1_047_576, 32_768, "fast GPT-4.1")
    CLAUDE_SONNET_4_5 = _claude("claude-sonnet-4-5", "default when LLM_PROVIDER=anthropic")
    CLAUDE_HAIKU_4_5 = _claude("claude-haiku-4-5", "fast Claude for batch runs")

    @property
    def spec(self) -> LLMSpec:
        return self.value

    @classmethod
    def by_name(cls, name: str) -> "LLMModel | None":
        return next((m for m in cls if m.spec.name == name), None)

    @classmethod
    def list_by_provider(cls, provider: LLMProviderType) -> list["LLMModel"]:
        return [m for m in cls if m.spec.provider == provider]


DEFAULT_OPENAI_MODEL = LLMModel.GPT_4O
DEFAULT_ANTHROPIC_MODEL = LLMModel.CLAUDE_SONNET_4_5

DEFAULT_MODEL = DEFAULT_OPENAI_MODEL


def get_llm_spec(model: "str | LLMModel | LLMSpec") -> LLMSpec:
    """Resolve a model reference to its LLMSpec.

    Raises:
        ValueError: If the name is not registered.
    """
    if isinstance(model, LLMSpec):
        return model
    if isinstance(model, LLMModel):
        return model.spec
    found = LLMModel.by_name(model)
    if found is None:
        raise ValueError(f"Unknown model: {model}")
    return found.spec


__all__ = [
    "LLMCapability",
    "LLMProviderType",
    "LLMSpec",
    "LLMModel",
    "DEFAULT_OPENAI_MODEL",
    "DEFAULT_ANTHROPIC_MODEL",
    "DEFAULT_MODEL",
    "get_llm_spec",
]
