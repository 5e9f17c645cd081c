"""CLI command for issuing development access tokens."""

import click

from ..api.auth import create_access_token
from ..identity import Identity


@click.group("token")
def token_group() -> None:
    """Manage access tokens."""
    pass


@token_group.command("issue")
@click.option("--user-id", required=True, help="Subject of the token")
@click.option("--email", default="", help="User email")
@click.option("--name", default="", help="User display name")
@click.option("--role", default="staff", type=click.Choice(["staff", "admin"]), help="User role")
def issue(user_id: str, email: str, name: str, role: str) -> None:
    """Print a signed bearer token for USER_ID."""
    identity = Identity(id=user_id, email=email, name=name, role=role)
    click.echo(create_access_token(identity))
