"""
Command-line interface for the demand management client.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from pathlib import Path
from typing import Any

import click

from demandhub.client.client import DemandClient
from demandhub.common.exceptions import DemandHubError, InvalidTokenFormat
from demandhub.common.models import Demand, DemandFilters, DemandStatus


def _client(ctx: click.Context) -> DemandClient:
    client: DemandClient = ctx.obj
    try:
        client.restore()
    except InvalidTokenFormat as err:
        raise click.ClickException(client.session.last_error or str(err)) from err
    return client


def _run(fn: Any, *args: Any, **kwargs: Any) -> Any:
    try:
        return fn(*args, **kwargs)
    except DemandHubError as err:
        raise click.ClickException(err.message) from err


def _parse_article(value: str) -> dict[str, Any]:
    """NAME:QTY:PRICE:DESCRIPTION"""
    parts = value.split(":", 3)
    if len(parts) != 4:
        msg = f"Invalid article {value!r}, expected NAME:QTY:PRICE:DESCRIPTION"
        raise click.BadParameter(msg)
    name, quantity, price, description = parts
    return {
        "name": name.strip(),
        "quantity": quantity.strip(),
        "price": price.strip(),
        "description": description.strip(),
    }


def _echo_demand(demand: Demand, *, detailed: bool = False) -> None:
    click.echo(
        f"#{demand.id} [{demand.status.value}] {demand.title} "
        f"({demand.created_by}, {demand.created_at:%Y-%m-%d}) total={demand.total:.2f}"
    )
    if not detailed:
        return
    click.echo(f"  {demand.description}")
    for article in demand.articles:
        click.echo(
            f"  - {article.name} x{article.quantity} @ {article.price:.2f}"
            f" = {article.line_total:.2f}"
        )
    if demand.file_name:
        click.echo(f"  attachment: {demand.file_name}")
    if demand.rejection_comment:
        click.echo(f"  rejection: {demand.rejection_comment}")


@click.group()
@click.option(
    "--api-url",
    default=None,
    help="Backend base URL (default: from DEMANDHUB_API_URL env or http://localhost:8080/api/v1)",
)
@click.option(
    "--token-file",
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Where the session token is kept (default: ~/.demandhub/token)",
)
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Logging level",
)
@click.pass_context
def cli(
    ctx: click.Context,
    api_url: str | None,
    token_file: Path | None,
    log_level: str | None,
) -> None:
    """Demand management client"""
    level = logging.getLevelName(log_level.upper()) if log_level else None
    ctx.obj = DemandClient(api_url=api_url, token_file=token_file, log_level=level)
    ctx.call_on_close(ctx.obj.close)


@cli.command()
@click.option("--email", prompt=True)
@click.option("--password", prompt=True, hide_input=True)
@click.pass_context
def login(ctx: click.Context, email: str, password: str) -> None:
    """Log in and keep the session token"""
    client: DemandClient = ctx.obj
    identity = _run(client.login, email, password)
    click.echo(f"Logged in as {identity.display_name} ({identity.role.value})")


@cli.command()
@click.pass_context
def logout(ctx: click.Context) -> None:
    """Log out and forget the session token"""
    client = _client(ctx)
    client.logout()
    click.echo("Logged out")


@cli.command()
@click.pass_context
def whoami(ctx: click.Context) -> None:
    """Show the current user"""
    identity = _client(ctx).current_identity()
    if identity is None:
        raise click.ClickException("Not logged in")
    click.echo(f"{identity.display_name} <{identity.email}> ({identity.role.value})")


@cli.command(name="list")
@click.option(
    "--status",
    type=click.Choice([s.value for s in DemandStatus]),
    default=None,
)
@click.option("--search", default=None)
@click.option("--page", type=click.IntRange(min=1), default=None)
@click.option("--limit", type=click.IntRange(min=1), default=None)
@click.pass_context
def list_command(
    ctx: click.Context,
    status: str | None,
    search: str | None,
    page: int | None,
    limit: int | None,
) -> None:
    """List demands"""
    client = _client(ctx)
    filters = None
    if any(value is not None for value in (status, search, page, limit)):
        filters = DemandFilters(status=status, search=search, page=page, limit=limit)
    demands = _run(client.list_demands, filters)
    if not demands:
        click.echo("No demands")
    for demand in demands:
        _echo_demand(demand)


@cli.command()
@click.argument("demand_id", type=int)
@click.pass_context
def show(ctx: click.Context, demand_id: int) -> None:
    """Show one demand with its articles"""
    _echo_demand(_run(_client(ctx).get_demand, demand_id), detailed=True)


@cli.command()
@click.option("--title", required=True)
@click.option("--description", required=True)
@click.option(
    "--article",
    "articles",
    multiple=True,
    required=True,
    help="NAME:QTY:PRICE:DESCRIPTION (repeatable)",
)
@click.option(
    "--file",
    "attachment",
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="PDF or Word attachment (max 10MB)",
)
@click.pass_context
def create(
    ctx: click.Context,
    title: str,
    description: str,
    articles: tuple[str, ...],
    attachment: Path | None,
) -> None:
    """Create a demand"""
    client = _client(ctx)
    demand = _run(
        client.create_demand,
        title=title,
        description=description,
        articles=[_parse_article(a) for a in articles],
        attachment=attachment,
    )
    click.echo(f"Created demand #{demand.id}")


@cli.command()
@click.argument("demand_id", type=int)
@click.pass_context
def approve(ctx: click.Context, demand_id: int) -> None:
    """Approve a pending demand"""
    demand = _run(_client(ctx).approve, demand_id)
    click.echo(f"Demand #{demand.id} approved")


@cli.command()
@click.argument("demand_id", type=int)
@click.option("--comment", required=True, help="Reason for the rejection (10-500 characters)")
@click.pass_context
def reject(ctx: click.Context, demand_id: int, comment: str) -> None:
    """Reject a pending demand"""
    demand = _run(_client(ctx).reject, demand_id, comment)
    click.echo(f"Demand #{demand.id} rejected")


@cli.command()
@click.argument("demand_id", type=int)
@click.confirmation_option(prompt="Delete this demand?")
@click.pass_context
def delete(ctx: click.Context, demand_id: int) -> None:
    """Delete a demand"""
    _run(_client(ctx).delete_demand, demand_id)
    click.echo(f"Demand #{demand_id} deleted")


@cli.command()
@click.pass_context
def stats(ctx: click.Context) -> None:
    """Show demand counts per status"""
    summary = _run(_client(ctx).stats)
    for status in DemandStatus:
        click.echo(f"{status.value}: {summary.counts[status]}")
    click.echo(f"total: {summary.total}")
    click.echo(f"amount: {summary.total_amount.quantize(Decimal('0.01'))}")


@cli.command(name="can-open")
@click.argument("path")
@click.pass_context
def can_open(ctx: click.Context, path: str) -> None:
    """Show whether the current user may open an application page"""
    result = _client(ctx).navigate(path)
    line = result.decision.value
    if result.redirect_to:
        line += f" -> {result.redirect_to}"
    click.echo(line)


if __name__ == "__main__":
    cli()
