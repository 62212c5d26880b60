"""
Classification Engine Test Module

Covers the won/lost decision:
- Won vocabulary (exact and substring, case and whitespace insensitive)
- Lost vocabulary and unrecognized statuses both classify as lost
- Pipeline status "sold" overrides the status field
- Unrecognized status reporting and the warning logged by classify_batch
"""

import logging

import pytest

from revenue_reports.models import Estimate, Outcome
from revenue_reports.services.classification import (
    LOST_STATUSES,
    WON_STATUSES,
    classify,
    classify_batch,
    find_unrecognized_statuses,
    is_lost_status,
    is_sold_pipeline_status,
    is_won,
    is_won_status,
    normalize_status,
)


# =============================================================================
# TEST CLASS: Won Vocabulary
# =============================================================================

class TestWonStatuses:
    """Statuses that count as won."""

    @pytest.mark.parametrize('status', list(WON_STATUSES))
    def test_every_won_phrase_is_won(self, status: str):
        result = classify(Estimate(id='e1', status=status))
        assert result.won is True
        assert result.recognized is True
        assert result.outcome == Outcome.WON

    def test_matching_ignores_case_and_whitespace(self):
        assert is_won(Estimate(id='e1', status='  CONTRACT SIGNED  '))
        assert is_won_status('\tWork In Progress\n')

    def test_substring_match_counts_as_won(self):
        """A status that contains a won phrase is won."""
        assert is_won(Estimate(id='e1', status='Verbal Contract Award - awaiting PO'))


# =============================================================================
# TEST CLASS: Lost and Unrecognized
# =============================================================================

class TestLostStatuses:
    """Statuses that count as lost."""

    @pytest.mark.parametrize('status', list(LOST_STATUSES))
    def test_every_lost_phrase_is_lost_and_recognized(self, status: str):
        result = classify(Estimate(id='e1', status=status))
        assert result.won is False
        assert result.recognized is True
        assert result.outcome == Outcome.LOST

    def test_unrecognized_status_defaults_to_lost(self):
        result = classify(Estimate(id='e1', status='Pending Review'))
        assert result.won is False
        assert result.recognized is False

    def test_missing_status_is_lost(self):
        result = classify(Estimate(id='e1'))
        assert result.won is False
        assert result.recognized is False

    def test_is_lost_status_only_matches_lost_vocabulary(self):
        assert is_lost_status('Estimate Lost - Price Too High')
        assert not is_lost_status('Pending Review')
        assert not is_lost_status(None)


# =============================================================================
# TEST CLASS: Pipeline Status Priority
# =============================================================================

class TestPipelineStatus:
    """The pipeline status 'sold' wins over the status field."""

    def test_sold_pipeline_overrides_lost_status(self):
        estimate = Estimate(id='e1', status='Estimate Lost', pipeline_status='Sold')
        assert classify(estimate).won is True

    def test_pipeline_containing_sold_is_won(self):
        assert is_sold_pipeline_status('Sold - Awaiting Deposit')

    def test_other_pipeline_status_falls_back_to_status(self):
        estimate = Estimate(id='e1', status='Estimate Lost', pipeline_status='Pending')
        assert classify(estimate).won is False

    def test_missing_pipeline_status(self):
        assert not is_sold_pipeline_status(None)
        assert normalize_status(None) == ''


# =============================================================================
# TEST CLASS: Totality and Batch Behaviour
# =============================================================================

class TestBatchClassification:
    """Batch classification and unrecognized status reporting."""

    def test_classification_is_total(self):
        """Every status maps to exactly one of won/lost, none raise."""
        statuses = [None, '', 'won', 'lost', '???', 'Sold', 'estimate on hold', '12345']
        estimates = [Estimate(id=f'e{i}', status=s) for i, s in enumerate(statuses)]

        results = classify_batch(estimates)

        assert len(results) == len(estimates)
        assert all(r.outcome in (Outcome.WON, Outcome.LOST) for r in results)

    def test_classify_batch_preserves_order(self):
        estimates = [
            Estimate(id='e1', status='Won'),
            Estimate(id='e2', status='Estimate Lost'),
            Estimate(id='e3', status='Work Complete'),
        ]
        assert [r.won for r in classify_batch(estimates)] == [True, False, True]

    def test_find_unrecognized_statuses_distinct_in_order(self):
        estimates = [
            Estimate(id='e1', status='Pending Review'),
            Estimate(id='e2', status='Won'),
            Estimate(id='e3', status='Draft'),
            Estimate(id='e4', status='Pending Review'),
            Estimate(id='e5'),
        ]
        assert find_unrecognized_statuses(estimates) == ['Pending Review', 'Draft']

    def test_classify_batch_warns_once_per_unrecognized_status(self, caplog):
        estimates = [
            Estimate(id='e1', status='Pending Review'),
            Estimate(id='e2', status='Pending Review'),
            Estimate(id='e3', status='Won'),
        ]

        with caplog.at_level(logging.WARNING, logger='revenue_reports.services.classification'):
            classify_batch(estimates)

        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert 'Pending Review' in warnings[0].getMessage()
        assert 'defaulting to lost' in warnings[0].getMessage()
