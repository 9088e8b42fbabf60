"""Tests for the typer CLI, with the collaborator replaced by the in-memory fake."""

from datetime import UTC, datetime
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from board.viewmodel import FeatureRow
from cli.main import _format_age, _format_row, app
from tests.conftest import FakeFeatureClient, make_feature

runner = CliRunner()


@pytest.fixture
def board_client():
    fake = FakeFeatureClient(
        features=[
            make_feature("1", title="Dark mode", votes=5, day=3),
            make_feature("2", title="Export CSV", votes=12, day=1),
        ],
        voted={"2"},
    )
    with patch("cli.main._make_client", return_value=fake):
        yield fake


def test_features_lists_by_votes(board_client):
    result = runner.invoke(app, ["features", "--app", "app-1"])
    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert "Export CSV" in lines[0]
    assert lines[0].startswith("*")
    assert "Dark mode" in lines[1]
    assert board_client.fetch_calls == ["app-1"]


def test_features_sort_by_date(board_client):
    result = runner.invoke(app, ["features", "--sort", "date"])
    lines = result.output.splitlines()
    assert "Dark mode" in lines[0]


def test_features_search_no_results(board_client):
    result = runner.invoke(app, ["features", "--search", "nothing"])
    assert result.exit_code == 0
    assert "No results" in result.output


def test_features_empty_board():
    with patch("cli.main._make_client", return_value=FakeFeatureClient()):
        result = runner.invoke(app, ["features"])
    assert "No features yet" in result.output


def test_vote(board_client):
    result = runner.invoke(app, ["vote", "1"])
    assert result.exit_code == 0
    assert "Voted for 'Dark mode' (6 votes)" in result.output
    assert board_client.upvote_calls == ["1"]


def test_vote_already_voted(board_client):
    result = runner.invoke(app, ["vote", "2"])
    assert result.exit_code == 0
    assert "Already voted" in result.output
    assert board_client.upvote_calls == []


def test_vote_unknown_feature(board_client):
    result = runner.invoke(app, ["vote", "missing"])
    assert result.exit_code == 1
    assert "not found" in result.output


class _UnreachableBoard(FakeFeatureClient):
    async def fetch_features(self, app_id):
        self.fetch_calls.append(app_id)
        self.last_error = "connection refused"


def test_vote_reports_load_error():
    fake = _UnreachableBoard()
    with patch("cli.main._make_client", return_value=fake):
        result = runner.invoke(app, ["vote", "1"])
    assert result.exit_code == 1
    assert "Could not load features: connection refused" in result.output
    assert fake.upvote_calls == []


def test_features_reports_load_error():
    with patch("cli.main._make_client", return_value=_UnreachableBoard()):
        result = runner.invoke(app, ["features"])
    assert result.exit_code == 1
    assert "Could not load features" in result.output


def test_format_age():
    created = datetime(2025, 1, 1, tzinfo=UTC)
    assert _format_age(created, datetime(2025, 1, 1, 0, 5, tzinfo=UTC)) == "5m"
    assert _format_age(created, datetime(2025, 1, 1, 3, 0, tzinfo=UTC)) == "3h"
    assert _format_age(created, datetime(2025, 1, 13, tzinfo=UTC)) == "12d"
    assert _format_age(created, datetime(2024, 12, 31, tzinfo=UTC)) == "0m"


def test_row_shows_age():
    row = FeatureRow(
        id="1",
        title="Dark mode",
        description="",
        votes_count=5,
        status_label="Open",
        comment_count=2,
        created_at=datetime(2025, 1, 1, tzinfo=UTC),
        has_voted=False,
    )
    line = _format_row(row, now=datetime(2025, 1, 4, tzinfo=UTC))
    assert line == "     5    3d  [Open] Dark mode  (2 comments)  1"


def test_features_sort_by_date_shows_ages(board_client):
    result = runner.invoke(app, ["features", "--sort", "date"])
    lines = result.output.splitlines()
    assert "Dark mode" in lines[0]
    assert all("d  [" in line for line in lines)
