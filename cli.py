"""CLI commands for wedding RSVP management."""

import asyncio
from pathlib import Path

import typer
import uvicorn

from src.config.logging import setup_logging
from src.config.settings import settings
from src.guests.aggregation import aggregate, summarize_collection
from src.guests.dtos import (
    BatchWriteError,
    InvalidGuestDataError,
    InvitationCodeExhaustedError,
    StoreError,
)
from src.guests.features.create_group.write_model import GroupCreateWriteModel, NewMemberDTO
from src.guests.features.dashboard.csv_export import CSV_FILENAME, export_individuals_csv
from src.guests.repository.read_models import SqlIndividualReadModel
from src.guests.repository.write_models import SqlIndividualWriteModel

app = typer.Typer(help="CLI commands for wedding RSVP management")


def parse_member(value: str) -> NewMemberDTO:
    """Split "First Last" into names; everything after the first word is the last name."""
    first_name, _, last_name = value.strip().partition(" ")
    return NewMemberDTO(first_name=first_name, last_name=last_name.strip())


@app.command()
def create_group(
    name: str = typer.Option(
        ...,
        "--name",
        "-n",
        help="Group name shown to the guests, e.g. 'The Doe Family'",
    ),
    members: list[str] = typer.Option(
        ...,
        "--member",
        "-m",
        help='Member as "First Last"; repeat for each member',
    ),
):
    """Create an invitation group and print its invitation code."""
    write_model = GroupCreateWriteModel(
        read_model=SqlIndividualReadModel(),
        write_model=SqlIndividualWriteModel(),
    )

    try:
        group = asyncio.run(
            write_model.create_group(group_name=name, members=[parse_member(m) for m in members])
        )
    except InvalidGuestDataError as e:
        typer.secho(str(e), fg=typer.colors.RED)
        raise typer.Exit(1)
    except BatchWriteError as e:
        typer.secho(f"Failed to add invitation: {e}", fg=typer.colors.RED)
        typer.secho(f"  Invitation code: {e.invitation_code}", fg=typer.colors.CYAN)
        for individual in e.created:
            typer.secho(f"  Added: {individual.full_name}", fg=typer.colors.YELLOW)
        for individual in e.skipped:
            typer.secho(
                f"  Not added: {individual.first_name} {individual.last_name}",
                fg=typer.colors.YELLOW,
            )
        raise typer.Exit(1)
    except InvitationCodeExhaustedError as e:
        typer.secho(f"Could not allocate an invitation code: {e}", fg=typer.colors.RED)
        raise typer.Exit(1)
    except StoreError as e:
        typer.secho(f"Database unavailable: {e}", fg=typer.colors.RED)
        raise typer.Exit(1)

    typer.secho("Group created!", fg=typer.colors.GREEN)
    typer.secho(f"  Group: {group.group_name}", fg=typer.colors.BLUE)
    typer.secho(f"  Invitation code: {group.invitation_code}", fg=typer.colors.CYAN)
    for member in group.members:
        typer.secho(f"  - {member.full_name}", fg=typer.colors.BLUE)


@app.command()
def list_groups(
    search: str = typer.Option(
        None,
        "--search",
        "-s",
        help="Only groups whose code, group name or member names contain this text",
    ),
):
    """List invitation groups with their RSVP counts."""
    try:
        individuals = asyncio.run(SqlIndividualReadModel().find_all())
    except StoreError as e:
        typer.secho(f"Database unavailable: {e}", fg=typer.colors.RED)
        raise typer.Exit(1)

    groups = aggregate(individuals, search)
    if not groups:
        typer.secho("No groups found", fg=typer.colors.YELLOW)
        return

    for view in groups.values():
        typer.secho(f"{view.invitation_code}  {view.group_name}", fg=typer.colors.GREEN)
        typer.secho(
            f"  {view.total_members} members: {view.accepted_count} accepted, "
            f"{view.declined_count} declined, {view.pending_count} pending",
            fg=typer.colors.BLUE,
        )
        for member in view.members:
            typer.echo(f"  - {member.full_name} ({member.rsvp_status.value})")

    summary = summarize_collection(individuals)
    typer.echo()
    typer.secho(
        f"{summary.total_groups} groups, {summary.total_individuals} guests in total",
        fg=typer.colors.MAGENTA,
    )


@app.command()
def export_csv(
    output: Path = typer.Option(
        Path(CSV_FILENAME),
        "--output",
        "-o",
        help="File to write the guest list to",
    ),
):
    """Export every guest to a CSV file."""
    try:
        individuals = asyncio.run(SqlIndividualReadModel().find_all())
    except StoreError as e:
        typer.secho(f"Database unavailable: {e}", fg=typer.colors.RED)
        raise typer.Exit(1)

    output.write_text(export_individuals_csv(individuals), encoding="utf-8")
    typer.secho(f"Exported {len(individuals)} guests to {output}", fg=typer.colors.GREEN)


@app.command()
def delete_group(
    invitation_code: str = typer.Argument(
        ...,
        help="Invitation code of the group to delete",
    ),
    yes: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Delete without asking for confirmation",
    ),
):
    """Delete every member of a group."""
    invitation_code = invitation_code.strip().upper()
    if not yes:
        typer.confirm(f"Delete every member of group {invitation_code}?", abort=True)

    try:
        deleted_count = asyncio.run(SqlIndividualWriteModel().delete_by_code(invitation_code))
    except StoreError as e:
        typer.secho(f"Database unavailable: {e}", fg=typer.colors.RED)
        raise typer.Exit(1)

    if deleted_count == 0:
        typer.secho(f"No group found with invitation code {invitation_code}", fg=typer.colors.RED)
        raise typer.Exit(1)

    typer.secho(f"Deleted {deleted_count} members of group {invitation_code}", fg=typer.colors.GREEN)


@app.command()
def serve(
    reload: bool = typer.Option(False, "--reload", help="Restart on code changes"),
):
    """Run the API server."""
    uvicorn.run(
        "src.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=reload,
    )


if __name__ == "__main__":
    setup_logging()
    app()
