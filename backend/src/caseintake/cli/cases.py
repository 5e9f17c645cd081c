"""CLI commands for case lookup."""

import json

import click

from ..cases.store import CaseStore
from ..errors import CaseIntakeError
from ._runtime import case_line, run_with_factory


@click.group("case")
def case_group() -> None:
    """Look up cases."""
    pass


def _emit(cases, as_json: bool) -> None:
    if as_json:
        click.echo(json.dumps([c.model_dump(mode="json") for c in cases], indent=2))
        return
    if not cases:
        click.echo("No cases found.")
    for case in cases:
        click.echo(case_line(case))


@case_group.command("search")
@click.argument("query", default="")
@click.option("--limit", default=None, type=int, help="Maximum results")
@click.option("--deleted", "include_deleted", is_flag=True, help="Include soft-deleted cases")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def search(query: str, limit: int | None, include_deleted: bool, as_json: bool) -> None:
    """Search cases by contact name or phone."""

    async def _search(factory):
        return await CaseStore(factory).search(query, limit=limit, include_deleted=include_deleted)

    try:
        cases = run_with_factory(_search)
    except CaseIntakeError as e:
        raise click.ClickException(e.message)
    _emit(cases, as_json)


@case_group.command("history")
@click.argument("phone")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def history(phone: str, as_json: bool) -> None:
    """Show every case for PHONE, deleted ones included."""

    async def _history(factory):
        return await CaseStore(factory).history(phone)

    try:
        cases = run_with_factory(_history)
    except CaseIntakeError as e:
        raise click.ClickException(e.message)
    _emit(cases, as_json)
