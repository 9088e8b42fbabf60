import asyncio
from datetime import UTC, datetime

import typer
import uvicorn

from backend.app.config import settings
from board.client import HttpFeatureClient
from board.errors import AlreadyVotedError
from board.viewmodel import FeatureListViewModel, FeatureRow, ListState, SortKey

app = typer.Typer(help="FeatureFlow - feature requests and voting")

_EMPTY_MESSAGES = {
    ListState.EMPTY: "No features yet. Be the first to suggest one!",
    ListState.NO_RESULTS: "No results. Try a different search.",
}


def _make_client() -> HttpFeatureClient:
    return HttpFeatureClient(
        settings.api_url, settings.user_id, timeout=settings.request_timeout
    )


def _format_age(created_at: datetime, now: datetime | None = None) -> str:
    """Short relative age: 5m, 3h, 12d."""
    seconds = max(0, int(((now or datetime.now(UTC)) - created_at).total_seconds()))
    if seconds < 3600:
        return f"{seconds // 60}m"
    if seconds < 86400:
        return f"{seconds // 3600}h"
    return f"{seconds // 86400}d"


def _format_row(row: FeatureRow, now: datetime | None = None) -> str:
    marker = "*" if row.has_voted else " "
    age = _format_age(row.created_at, now)
    return (
        f"{marker}{row.votes_count:>5} {age:>5}  [{row.status_label}] {row.title}"
        f"  ({row.comment_count} comments)  {row.id}"
    )


async def _list_features(app_id: str, search: str, sort: SortKey) -> tuple[list[str], int]:
    async with _make_client() as client:
        vm = FeatureListViewModel(client, app_id)
        vm.search_text = search
        vm.sort_key = sort
        await vm.activate()
        if client.last_error:
            return [f"Could not load features: {client.last_error}"], 1
        state = vm.list_state()
        if state in _EMPTY_MESSAGES:
            return [_EMPTY_MESSAGES[state]], 0
        return [_format_row(row) for row in vm.rows()], 0


async def _vote(app_id: str, feature_id: str) -> tuple[str, int]:
    async with _make_client() as client:
        vm = FeatureListViewModel(client, app_id)
        await vm.activate()
        if client.last_error:
            return f"Could not load features: {client.last_error}", 1
        feature = next((f for f in client.features if f.id == feature_id), None)
        if feature is None:
            return f"Feature {feature_id} not found on board {app_id}", 1
        try:
            await vm.request_upvote(feature)
        except AlreadyVotedError:
            return f"Already voted for '{feature.title}'", 0
        if client.last_error:
            return f"Vote failed: {client.last_error}", 1
        updated = next(f for f in client.features if f.id == feature_id)
        return f"Voted for '{updated.title}' ({updated.votes_count} votes)", 0


@app.command()
def start() -> None:
    """Start the FeatureFlow server."""
    typer.echo("Starting FeatureFlow...")
    uvicorn.run(
        "backend.app.main:app",
        host=settings.host,
        port=settings.port,
    )


@app.command()
def features(
    app_id: str = typer.Option(settings.app_id, "--app", help="Board to list"),
    search: str = typer.Option("", "--search", "-s", help="Filter by title or description"),
    sort: SortKey = typer.Option(SortKey.VOTES, "--sort", help="Sort by votes or date"),
) -> None:
    """List the features on a board."""
    lines, code = asyncio.run(_list_features(app_id, search, sort))
    for line in lines:
        typer.echo(line)
    raise typer.Exit(code)


@app.command()
def vote(
    feature_id: str,
    app_id: str = typer.Option(settings.app_id, "--app", help="Board the feature is on"),
) -> None:
    """Upvote a feature."""
    message, code = asyncio.run(_vote(app_id, feature_id))
    typer.echo(message)
    raise typer.Exit(code)


if __name__ == "__main__":
    app()
