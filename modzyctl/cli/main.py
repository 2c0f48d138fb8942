"""Main CLI entry point for modzyctl."""

from __future__ import annotations

from typing import Optional

import click

from modzyctl import __version__
from modzyctl.cli.common import common_options, get_client, handle_errors

# Import command groups
from modzyctl.cli.config_cmd import config
from modzyctl.cli.job import job
from modzyctl.cli.model import model
from modzyctl.cli.result import result
from modzyctl.core.output import OutputFormat, print_json, print_key_value
from modzyctl.services.features import FeatureService

# =============================================================================
# Main CLI Group
# =============================================================================


@click.group()
@click.version_option(version=__version__, prog_name="modzyctl")
def cli() -> None:
    """modzyctl - A CLI for the Modzy inference API.

    Browse models, submit jobs (including chunk-uploaded files), track them
    and fetch their results.

    Get started:

      modzyctl config init             # Store URL and API key

      modzyctl model list              # Browse models

      modzyctl job submit-file ...     # Upload files and run a job

    Use --help on any command for more information.
    """
    pass


# =============================================================================
# Register Command Groups
# =============================================================================

cli.add_command(config)
cli.add_command(model)
cli.add_command(job)
cli.add_command(result)


# =============================================================================
# Top-Level Commands
# =============================================================================


@cli.command()
@common_options
@handle_errors
def features(profile_name: Optional[str], output_format: OutputFormat) -> None:
    """Show server features, including the upload chunk limit."""
    with get_client(profile_name) as client:
        service = FeatureService(client)
        data = service.get_features()
        chunk_limit = service.get_upload_chunk_limit()

    if output_format == OutputFormat.JSON:
        print_json({**data, "chunkSizeBytes": chunk_limit})
    else:
        print_key_value({**data, "chunk_size_bytes": chunk_limit}, title="Features")


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
