from __future__ import annotations

from specforge.services.completeness_scorer import new_completeness_scorer
from specforge.services.snapshot_merger import merge_snapshots


def test_lists_are_concatenated_in_batch_order():
    merged = merge_snapshots(
        [
            {"contracts": [{"id": "c1"}]},
            {"contracts": [{"id": "c2"}], "risks": [{"id": "r1"}]},
        ]
    )

    assert merged["contracts"] == [{"id": "c1"}, {"id": "c2"}]
    assert merged["risks"] == [{"id": "r1"}]


def test_non_list_values_replace_earlier_ones():
    merged = merge_snapshots(
        [
            {"project_overview": {"name": "old"}, "modules": [1]},
            {"project_overview": {"name": "new"}, "modules": {"core": {}}},
        ]
    )

    assert merged["project_overview"] == {"name": "new"}
    assert merged["modules"] == {"core": {}}


def test_list_after_object_replaces_it():
    merged = merge_snapshots([{"apis": {"a": 1}}, {"apis": [1]}])
    assert merged["apis"] == [1]


def test_inputs_are_not_mutated():
    first = {"apis": [1]}
    second = {"apis": [2]}

    merge_snapshots([first, second])

    assert first == {"apis": [1]}
    assert second == {"apis": [2]}


def test_incremental_batches_raise_the_score():
    scorer = new_completeness_scorer()
    batches = [{"contracts": [{"id": "c1"}]}, {"risks": [{"id": "r1"}]}]

    partial = scorer.score_submission(merge_snapshots(batches[:1]))
    combined = scorer.score_submission(merge_snapshots(batches))

    assert partial.score == 13
    assert combined.score == 25
