"""Domain entities — pure data structures with no external dependencies."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum

API_KEY_MASK = "********"


class DocumentCategory(str, Enum):
    """Expected top-level section of a project-description submission.

    Declaration order is the canonical order used in scoring output.
    """

    PROJECT_OVERVIEW = "project_overview"
    TECH_STACK = "tech_stack"
    MODULES = "modules"
    APIS = "apis"
    DATA_MODELS = "data_models"
    CONTRACTS = "contracts"
    RISKS = "risks"
    CHANGE_SENSITIVITY = "change_sensitivity"


@dataclass(frozen=True, slots=True)
class ScoringResult:
    """Outcome of grading one submission for completeness."""

    score: int
    missing_categories: list[str] = field(default_factory=list)
    unresolved_references: list[str] = field(default_factory=list)
    prompt: str = ""


class LlmProvider(str, Enum):
    """Known LLM provider names."""

    OPENAI = "openai"
    OLLAMA = "ollama"
    GEMINI = "gemini"
    ANTHROPIC = "anthropic"


@dataclass(frozen=True, slots=True)
class LlmConfiguration:
    """Provider binding used to build a gateway adapter."""

    provider: LlmProvider
    model: str
    api_key: str | None = None
    base_url: str | None = None

    @property
    def has_usable_key(self) -> bool:
        return bool(self.api_key) and self.api_key != API_KEY_MASK

    def masked(self) -> LlmConfiguration:
        """Return a copy safe to hand back to clients."""
        if not self.api_key:
            return self
        return replace(self, api_key=API_KEY_MASK)

    def with_api_key(self, api_key: str | None) -> LlmConfiguration:
        return replace(self, api_key=api_key)
