"""Completeness scoring for project-description submissions.

A submission is a mapping of category name to document.  Each of the eight
expected categories is worth an equal share of 100 points when it holds a
non-empty list or object.  Scoring is pure: no I/O and no configuration.
"""

from __future__ import annotations

import logging
import math
from typing import Mapping

from specforge.domain.entities import DocumentCategory, ScoringResult
from specforge.domain.value_objects import DocumentValue

logger = logging.getLogger(__name__)

EXPECTED_CATEGORIES: tuple[DocumentCategory, ...] = tuple(DocumentCategory)

UNRESOLVED_MISSING_REFERENCES = "Cannot resolve cross-references for missing categories"
PROMPT_ALL_DOCUMENTED = "All categories are documented."
PROMPT_MISSING = "Are there any additional undocumented items for the missing categories?"


def _round_half_away(value: float) -> int:
    if value < 0:
        return -math.floor(-value + 0.5)
    return math.floor(value + 0.5)


class CompletenessScorer:
    """Grades submissions on category presence only."""

    def __init__(
        self, categories: tuple[DocumentCategory, ...] = EXPECTED_CATEGORIES
    ) -> None:
        self._categories = categories
        self._weight = 100.0 / len(categories)

    def score_submission(self, documents: Mapping[str, object]) -> ScoringResult:
        """Score *documents*; unknown keys are ignored and nothing can raise."""
        missing: list[str] = []
        earned = 0.0

        for category in self._categories:
            doc = DocumentValue.from_raw(documents.get(category.value))
            if doc.is_present:
                earned += self._weight
            else:
                missing.append(category.value)

        # Reference checking across documents is not performed yet; a gap in
        # any category makes cross-references unverifiable.
        unresolved = [UNRESOLVED_MISSING_REFERENCES] if missing else []
        prompt = PROMPT_MISSING if missing else PROMPT_ALL_DOCUMENTED
        score = _round_half_away(earned)

        logger.info(
            "Scored submission: %d/100 (%d of %d categories missing)",
            score,
            len(missing),
            len(self._categories),
        )
        return ScoringResult(
            score=score,
            missing_categories=missing,
            unresolved_references=unresolved,
            prompt=prompt,
        )


def new_completeness_scorer() -> CompletenessScorer:
    """Return a scorer over the canonical eight categories."""
    return CompletenessScorer()
