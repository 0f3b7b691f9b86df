"""Tests for records, outcomes and the in-memory tracker."""

import pytest

from gitlab_to_github.errors import RecordNotFoundError
from gitlab_to_github.models.outcome import MigrationSummary, OutcomeStatus, StepOutcome
from gitlab_to_github.models.record import (
    MigrationRecord,
    Step,
    format_steps,
    parse_steps,
)
from gitlab_to_github.store.memory import MemoryProgress


class TestSteps:
    """Test step list parsing."""

    def test_parse_empty(self):
        assert parse_steps('') == []
        assert parse_steps(None) == []

    def test_parse_keeps_order_and_drops_duplicates(self):
        assert parse_steps('pushed> cloned >pushed>>') == ['pushed', 'cloned']

    def test_format(self):
        assert format_steps(['cloned', 'pushed']) == 'cloned>pushed'


class TestMigrationRecord:
    """Test migration record behaviour."""

    def test_strips_identifiers(self):
        record = MigrationRecord(source_url=' https://gitlab.example.com/a ', slug=' a ')

        assert record.source_url == 'https://gitlab.example.com/a'
        assert record.slug == 'a'
        assert record.is_valid

    def test_empty_slug_is_invalid(self):
        assert not MigrationRecord(source_url='https://gitlab.example.com/a', slug='').is_valid

    def test_next_pending_step(self):
        record = MigrationRecord(source_url='u', slug='s')
        assert record.next_pending_step() == Step.CLONED

        record = record.with_step(Step.CLONED)
        assert record.next_pending_step() == Step.PUSHED

        record = record.with_step(Step.PUSHED)
        assert record.next_pending_step() is None
        assert record.steps_field == 'cloned>pushed'

    def test_push_without_clone_is_not_complete(self):
        """Test that a recorded push alone still requires the clone."""
        record = MigrationRecord(source_url='u', slug='s', completed_steps=['pushed'])

        assert record.next_pending_step() == Step.CLONED

    def test_with_step_does_not_mutate(self):
        record = MigrationRecord(source_url='u', slug='s')

        updated = record.with_step(Step.CLONED)

        assert record.completed_steps == []
        assert updated.completed_steps == ['cloned']
        assert updated.with_step(Step.CLONED) is updated


class TestMemoryProgress:
    """Test the in-memory progress tracker."""

    def setup_method(self):
        self.progress = MemoryProgress(
            MigrationRecord(source_url='https://gitlab.example.com/a/b', slug='b')
        )

    def test_get_record(self):
        assert self.progress.get_record('b').slug == 'b'
        assert self.progress.get_record('other') is None

    def test_mark_complete_is_idempotent(self):
        assert self.progress.mark_complete('b', Step.CLONED) is True
        assert self.progress.mark_complete('b', Step.CLONED) is False
        assert self.progress.record.completed_steps == ['cloned']

    def test_load_next_pending_step(self):
        self.progress.mark_complete('b', Step.CLONED)

        assert self.progress.load_next_pending_step('b') == Step.PUSHED

    def test_unknown_slug(self):
        with pytest.raises(RecordNotFoundError):
            self.progress.mark_complete('other', Step.CLONED)
        with pytest.raises(RecordNotFoundError):
            self.progress.load_next_pending_step('other')


class TestMigrationSummary:
    """Test run summary tallies."""

    def test_counts(self):
        summary = MigrationSummary()
        summary.add(StepOutcome.completed('a'))
        summary.add(StepOutcome.failed('b', 'pushed', 'boom'))
        summary.add(StepOutcome.skipped('', 'empty slug'))
        summary.finish()

        assert summary.counts() == {'total': 3, 'completed': 1, 'failed': 1, 'skipped': 1}
        assert [o.slug for o in summary.failures] == ['b']
        assert summary.completed_at is not None

    def test_terminal_statuses(self):
        assert StepOutcome.completed('a').is_terminal
        assert StepOutcome.failed('a', 'cloned', 'x').is_terminal
        assert not StepOutcome.advanced('a', 'cloned').is_terminal
        assert StepOutcome.advanced('a', 'cloned').status == OutcomeStatus.ADVANCED
