"""Pydantic request / response DTOs for the API boundary."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, field_validator

from specforge.domain.entities import LlmConfiguration, LlmProvider, ScoringResult


class SubmissionRequest(BaseModel):
    """Request body for ``POST /imports/score``."""

    batches: list[dict[str, Any]]

    @field_validator("batches")
    @classmethod
    def _must_have_documents(cls, v: list[dict[str, Any]]) -> list[dict[str, Any]]:
        if not v or not any(v):
            msg = (
                "No documents were provided. Document and submit at least one "
                "category (e.g. contracts, apis, modules)."
            )
            raise ValueError(msg)
        return v


class ScoringResponse(BaseModel):
    """Completeness grade for the merged submission."""

    completeness_score: int
    missing_categories: list[str]
    unresolved_references: list[str]
    self_assessment_prompt: str

    @classmethod
    def from_result(cls, result: ScoringResult) -> ScoringResponse:
        return cls(
            completeness_score=result.score,
            missing_categories=result.missing_categories,
            unresolved_references=result.unresolved_references,
            self_assessment_prompt=result.prompt,
        )


class LlmConfigurationBody(BaseModel):
    """Provider configuration as exchanged with clients."""

    provider: LlmProvider
    model: str
    api_key: str | None = None
    base_url: str | None = None

    def to_domain(self) -> LlmConfiguration:
        return LlmConfiguration(
            provider=self.provider,
            model=self.model,
            api_key=self.api_key,
            base_url=self.base_url,
        )

    @classmethod
    def from_domain(cls, config: LlmConfiguration) -> LlmConfigurationBody:
        masked = config.masked()
        return cls(
            provider=masked.provider,
            model=masked.model,
            api_key=masked.api_key,
            base_url=masked.base_url,
        )


class ModelsResponse(BaseModel):
    models: list[str]


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    """Standard error envelope returned on all failure paths."""

    status: str = "error"
    message: str
