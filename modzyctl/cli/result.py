"""Result commands for modzyctl."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click

from modzyctl.cli.common import common_options, get_client, handle_errors
from modzyctl.core.output import OutputFormat, print_json, print_key_value, print_success
from modzyctl.services.results import ResultService


@click.group()
def result() -> None:
    """Fetch job results."""
    pass


@result.command("get")
@click.argument("job_id")
@common_options
@handle_errors
def result_get(job_id: str, profile_name: Optional[str], output_format: OutputFormat) -> None:
    """Show the results of a job.

    Example:
        modzyctl result get 6c7e0b63-26b0-4c6b-a7d0-2e0fd1a0f7a1 -o json
    """
    with get_client(profile_name) as client:
        res = ResultService(client).get_result(job_id)

    if output_format == OutputFormat.JSON:
        print_json(res.to_dict())
        return

    print_key_value(
        {
            "job_identifier": res.job_identifier,
            "finished": res.finished,
            "total": res.total,
            "completed": res.completed,
            "failed": res.failed,
            "elapsed_ms": res.elapsed_time,
        },
        title="Job Results",
    )
    if res.failures:
        click.echo()
        print_key_value(res.failures, title="Failures")


@result.command("output")
@click.argument("job_id")
@click.argument("input_key")
@click.argument("output_name")
@click.option(
    "--dest",
    "-d",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write raw output bytes to this file",
)
@common_options
@handle_errors
def result_output(
    job_id: str,
    input_key: str,
    output_name: str,
    dest: Optional[Path],
    profile_name: Optional[str],
    output_format: OutputFormat,
) -> None:
    """Fetch one output produced for one input of a job.

    Example:
        modzyctl result output <job> my-input results.json
        modzyctl result output <job> my-input mask.png -d mask.png
    """
    with get_client(profile_name) as client:
        service = ResultService(client)
        if dest is not None:
            content = service.get_output_contents(job_id, input_key, output_name, as_json=False)
        else:
            content = service.get_output_contents(job_id, input_key, output_name)

    if dest is not None:
        dest.write_bytes(content)
        print_success(f"Saved {output_name} to {dest}")
    else:
        print_json(content)
