"""CLI entry points for the case intake service.

Provides command-line tools for:
- Database setup
- Previewing and committing intake files
- Case search and phone history
- Issuing development access tokens
- Running the HTTP API
"""

import click

from .. import __version__
from .cases import case_group
from .db import db_group
from .ingest import ingest_group
from .serve import serve
from .token import token_group


@click.group()
@click.version_option(version=__version__, prog_name="caseintake")
def main():
    """Case intake - bulk intake and case lifecycle tools."""
    pass


main.add_command(db_group, name="db")
main.add_command(ingest_group, name="ingest")
main.add_command(case_group, name="case")
main.add_command(token_group, name="token")
main.add_command(serve, name="serve")


if __name__ == "__main__":
    main()
