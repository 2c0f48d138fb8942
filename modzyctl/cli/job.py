"""Job commands for modzyctl."""

from __future__ import annotations

from typing import Optional

import click

from modzyctl.cli.common import common_options, get_client, group_inputs, handle_errors
from modzyctl.core.output import (
    OutputFormat,
    console,
    create_upload_progress,
    print_json,
    print_output,
    print_success,
    print_table,
    print_warning,
)
from modzyctl.core.timeouts import DEFAULT_POLL_INTERVAL_SECONDS, DEFAULT_WAIT_TIMEOUT_SECONDS
from modzyctl.core.validation import validate_path_exists
from modzyctl.models.job import Job
from modzyctl.models.model import Engine
from modzyctl.models.progress import UploadProgress
from modzyctl.services.jobs import JobService, path_to_data_url
from modzyctl.services.uploads import FileJobService


def _print_job(job: Job, output_format: OutputFormat, quiet: bool = False) -> None:
    if quiet:
        click.echo(job.job_identifier)
    elif output_format == OutputFormat.JSON:
        print_json(job.to_dict())
    else:
        print_output(job.to_row(), format=output_format)


def _wait_and_print(
    service: JobService,
    job: Job,
    timeout: int,
    output_format: OutputFormat,
    quiet: bool,
) -> None:
    with console.status(f"Waiting for job {job.job_identifier}...") as status:
        final = service.wait(
            job.job_identifier,
            timeout=timeout,
            progress_callback=lambda j: status.update(
                f"Job {j.job_identifier}: {j.status} ({j.completed or 0}/{j.total or '?'})"
            ),
        )
    _print_job(final, output_format, quiet)


@click.group()
def job() -> None:
    """Submit and manage inference jobs."""
    pass


# =============================================================================
# Submission
# =============================================================================


@job.command("submit-text")
@click.argument("model_id")
@click.argument("version")
@click.option(
    "--input",
    "-i",
    "inputs",
    multiple=True,
    required=True,
    help="Text input as INPUT:ITEM=TEXT (repeatable)",
)
@click.option("--explain", is_flag=True, help="Request explanations")
@click.option("--wait", "-w", is_flag=True, help="Wait for completion")
@click.option("--timeout", type=int, default=DEFAULT_WAIT_TIMEOUT_SECONDS, help="Wait timeout in seconds")
@click.option("--quiet", "-q", is_flag=True, help="Only output the job ID")
@common_options
@handle_errors
def job_submit_text(
    model_id: str,
    version: str,
    inputs: tuple[str, ...],
    explain: bool,
    wait: bool,
    timeout: int,
    quiet: bool,
    profile_name: Optional[str],
    output_format: OutputFormat,
) -> None:
    """Submit a job with inline text inputs.

    Example:
        modzyctl job submit-text ed542963de 1.0.1 -i review-1:input.txt="Great product"
    """
    sources = group_inputs(inputs)

    with get_client(profile_name) as client:
        service = JobService(client)
        submitted = service.submit_text(model_id, version, sources, explain=explain)
        if not quiet:
            print_success(f"Submitted job {submitted.job_identifier}")
        if wait:
            _wait_and_print(service, submitted, timeout, output_format, quiet)
            return

    _print_job(submitted, output_format, quiet)


@job.command("submit-embedded")
@click.argument("model_id")
@click.argument("version")
@click.option(
    "--input",
    "-i",
    "inputs",
    multiple=True,
    required=True,
    help="File to embed as INPUT:ITEM=PATH (repeatable)",
)
@click.option("--explain", is_flag=True, help="Request explanations")
@click.option("--quiet", "-q", is_flag=True, help="Only output the job ID")
@common_options
@handle_errors
def job_submit_embedded(
    model_id: str,
    version: str,
    inputs: tuple[str, ...],
    explain: bool,
    quiet: bool,
    profile_name: Optional[str],
    output_format: OutputFormat,
) -> None:
    """Submit a job with small files embedded as base64 data URLs."""
    sources = {
        slot: {
            item: path_to_data_url(validate_path_exists(path, must_be_file=True))
            for item, path in items.items()
        }
        for slot, items in group_inputs(inputs).items()
    }

    with get_client(profile_name) as client:
        submitted = JobService(client).submit_embedded(model_id, version, sources, explain=explain)

    _print_job(submitted, output_format, quiet)


@job.command("submit-file")
@click.argument("model_id")
@click.argument("version")
@click.option(
    "--input",
    "-i",
    "inputs",
    multiple=True,
    required=True,
    help="File input as INPUT:ITEM=PATH (repeatable, uploaded in order)",
)
@click.option("--explain", is_flag=True, help="Request explanations")
@click.option("--upload-empty", is_flag=True, help="Send empty files instead of skipping them")
@click.option("--wait", "-w", is_flag=True, help="Wait for completion")
@click.option("--timeout", type=int, default=DEFAULT_WAIT_TIMEOUT_SECONDS, help="Wait timeout in seconds")
@click.option("--quiet", "-q", is_flag=True, help="Only output the job ID")
@common_options
@handle_errors
def job_submit_file(
    model_id: str,
    version: str,
    inputs: tuple[str, ...],
    explain: bool,
    upload_empty: bool,
    wait: bool,
    timeout: int,
    quiet: bool,
    profile_name: Optional[str],
    output_format: OutputFormat,
) -> None:
    """Submit a job whose files are uploaded in chunks.

    The job is opened, every file is uploaded in chunks no larger than the
    server limit, and the job is closed. On any failure the job is cancelled.

    Example:
        modzyctl job submit-file ed542963de 1.0.1 -i cat:image=./cat.jpg --wait
    """
    sources = {
        slot: {item: validate_path_exists(path, must_be_file=True) for item, path in items.items()}
        for slot, items in group_inputs(inputs).items()
    }
    sizes = {
        f"{slot}/{item}": path.stat().st_size
        for slot, items in sources.items()
        for item, path in items.items()
    }
    empty = [name for name, size in sizes.items() if size == 0]
    if empty and not upload_empty and not quiet:
        print_warning(f"Skipping empty files: {', '.join(empty)}")

    with get_client(profile_name) as client:
        service = FileJobService(client)

        if quiet:
            submitted = service.submit_files(
                model_id, version, sources, explain, upload_empty_items=upload_empty
            )
        else:
            with create_upload_progress() as progress:
                task = progress.add_task("Uploading", total=sum(sizes.values()))

                def on_chunk(p: UploadProgress) -> None:
                    progress.update(task, advance=p.chunk_bytes, description=f"{p.slot}/{p.item}")

                submitted = service.submit_files(
                    model_id,
                    version,
                    sources,
                    explain,
                    upload_empty_items=upload_empty,
                    progress_callback=on_chunk,
                )
            print_success(f"Submitted job {submitted.job_identifier}")

        if wait:
            _wait_and_print(service.jobs, submitted, timeout, output_format, quiet)
            return

    _print_job(submitted, output_format, quiet)


# =============================================================================
# Tracking
# =============================================================================


@job.command("status")
@click.argument("job_id")
@common_options
@handle_errors
def job_status(job_id: str, profile_name: Optional[str], output_format: OutputFormat) -> None:
    """Show the status of a job."""
    with get_client(profile_name) as client:
        found = JobService(client).get_job(job_id)

    _print_job(found, output_format)


@job.command("wait")
@click.argument("job_id")
@click.option("--timeout", type=int, default=DEFAULT_WAIT_TIMEOUT_SECONDS, help="Wait timeout in seconds")
@click.option(
    "--interval",
    type=float,
    default=DEFAULT_POLL_INTERVAL_SECONDS,
    help="Seconds between status checks",
)
@common_options
@handle_errors
def job_wait(
    job_id: str,
    timeout: int,
    interval: float,
    profile_name: Optional[str],
    output_format: OutputFormat,
) -> None:
    """Wait until a job reaches a terminal status."""
    with get_client(profile_name) as client:
        with console.status(f"Waiting for job {job_id}..."):
            final = JobService(client).wait(job_id, timeout=timeout, poll_interval=interval)

    _print_job(final, output_format)


@job.command("cancel")
@click.argument("job_id")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@common_options
@handle_errors
def job_cancel(job_id: str, yes: bool, profile_name: Optional[str], output_format: OutputFormat) -> None:
    """Cancel a job.

    Example:
        modzyctl job cancel 6c7e0b63-26b0-4c6b-a7d0-2e0fd1a0f7a1 -y
    """
    if not yes:
        click.confirm(f"Cancel job '{job_id}'?", abort=True)

    with get_client(profile_name) as client:
        JobService(client).cancel_job(job_id)

    print_success(f"Cancelled job {job_id}")


@job.command("history")
@click.option("--user", help="Filter by submitting user")
@click.option("--model", "model_name", help="Filter by model name")
@click.option("--status", help="Filter by status (e.g. COMPLETED)")
@click.option("--start-date", help="ISO start date (default: 30 days ago)")
@click.option("--end-date", help="ISO end date")
@click.option("--page", type=int, default=1)
@click.option("--per-page", type=int, default=100)
@click.option("--quiet", "-q", is_flag=True, help="Only output job IDs")
@common_options
@handle_errors
def job_history(
    user: Optional[str],
    model_name: Optional[str],
    status: Optional[str],
    start_date: Optional[str],
    end_date: Optional[str],
    page: int,
    per_page: int,
    quiet: bool,
    profile_name: Optional[str],
    output_format: OutputFormat,
) -> None:
    """Search job history.

    Example:
        modzyctl job history --status COMPLETED --per-page 10
    """
    with get_client(profile_name) as client:
        jobs = JobService(client).get_history(
            user=user,
            model=model_name,
            status=status,
            start_date=start_date,
            end_date=end_date,
            page=page,
            per_page=per_page,
        )

    if output_format == OutputFormat.JSON and not quiet:
        print_json([j.to_dict() for j in jobs])
        return

    print_output(
        [j.to_row() for j in jobs],
        format=output_format,
        columns=Job.table_columns(),
        title="Job History",
        quiet=quiet,
        id_field="job_identifier",
    )


@job.command("engines")
@common_options
@handle_errors
def job_engines(profile_name: Optional[str], output_format: OutputFormat) -> None:
    """Show processing engine status per model version."""
    with get_client(profile_name) as client:
        engines = JobService(client).get_processing_engines()

    if output_format == OutputFormat.JSON:
        print_json([e.to_dict() for e in engines])
    else:
        print_table(
            [e.to_row(Engine.table_columns()) for e in engines],
            Engine.table_columns(),
            title="Processing Engines",
        )
