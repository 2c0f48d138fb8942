"""Model catalog commands for modzyctl."""

from __future__ import annotations

from typing import Optional

import click

from modzyctl.cli.common import common_options, get_client, handle_errors
from modzyctl.core.output import OutputFormat, print_json, print_key_value, print_output, print_table
from modzyctl.services.catalog import ModelService


@click.group()
def model() -> None:
    """Browse the model catalog."""
    pass


@model.command("list")
@click.option("--name", help="Filter by name")
@click.option("--author", help="Filter by author")
@click.option("--active/--all", "active", default=None, help="Only active models")
@click.option("--per-page", type=int, default=500, show_default=True)
@click.option("--quiet", "-q", is_flag=True, help="Only output model IDs")
@common_options
@handle_errors
def model_list(
    name: Optional[str],
    author: Optional[str],
    active: Optional[bool],
    per_page: int,
    quiet: bool,
    profile_name: Optional[str],
    output_format: OutputFormat,
) -> None:
    """Search models.

    Example:
        modzyctl model list --name sentiment
    """
    with get_client(profile_name) as client:
        models = ModelService(client).list_models(
            name=name,
            author=author,
            is_active=active,
            per_page=per_page,
        )

    rows = [
        {
            "model_id": m.get("modelId", ""),
            "latest_version": m.get("latestVersion", ""),
            "versions": ", ".join(m.get("versions") or []),
        }
        for m in models
    ]
    print_output(
        rows if output_format == OutputFormat.TABLE else models,
        format=output_format,
        columns=["model_id", "latest_version", "versions"],
        title="Models",
        quiet=quiet,
        id_field="model_id" if output_format == OutputFormat.TABLE else "modelId",
    )


@model.command("get")
@click.argument("model_id")
@click.option("--by-name", is_flag=True, help="Treat MODEL_ID as a name to search for")
@common_options
@handle_errors
def model_get(
    model_id: str,
    by_name: bool,
    profile_name: Optional[str],
    output_format: OutputFormat,
) -> None:
    """Show model details.

    Example:
        modzyctl model get ed542963de
        modzyctl model get "Sentiment Analysis" --by-name
    """
    with get_client(profile_name) as client:
        service = ModelService(client)
        found = service.get_model_by_name(model_id) if by_name else service.get_model(model_id)

    data = found.to_dict()
    if output_format == OutputFormat.JSON:
        print_json(data)
    else:
        data["versions"] = ", ".join(found.versions)
        print_key_value(data, title=found.name or found.model_id)


@model.command("versions")
@click.argument("model_id")
@common_options
@handle_errors
def model_versions(model_id: str, profile_name: Optional[str], output_format: OutputFormat) -> None:
    """List versions of a model."""
    with get_client(profile_name) as client:
        versions = ModelService(client).list_versions(model_id)

    if output_format == OutputFormat.JSON:
        print_json(versions)
    else:
        for version in versions:
            click.echo(version)


@model.command("related")
@click.argument("model_id")
@click.option("--quiet", "-q", is_flag=True, help="Only output model IDs")
@common_options
@handle_errors
def model_related(
    model_id: str,
    quiet: bool,
    profile_name: Optional[str],
    output_format: OutputFormat,
) -> None:
    """List models related to a model."""
    with get_client(profile_name) as client:
        related = ModelService(client).get_related_models(model_id)

    rows = [{"model_id": m.get("modelId", ""), "name": m.get("name", "")} for m in related]
    print_output(
        rows if output_format == OutputFormat.TABLE else related,
        format=output_format,
        columns=["model_id", "name"],
        title="Related models",
        quiet=quiet,
        id_field="model_id" if output_format == OutputFormat.TABLE else "modelId",
    )


@model.command("version")
@click.argument("model_id")
@click.argument("version")
@common_options
@handle_errors
def model_version(
    model_id: str,
    version: str,
    profile_name: Optional[str],
    output_format: OutputFormat,
) -> None:
    """Show a model version with its inputs and outputs.

    Example:
        modzyctl model version ed542963de 1.0.1
    """
    with get_client(profile_name) as client:
        details = ModelService(client).get_version(model_id, version)

    if output_format == OutputFormat.JSON:
        print_json(details.to_dict())
        return

    print_key_value(
        {
            "version": details.version,
            "status": details.status or "-",
            "active": details.is_active,
            "created_at": details.created_at or "-",
        },
        title=f"{model_id} {details.version}",
    )
    print_table(
        [i.to_dict() for i in details.inputs],
        ["name", "accepted_media_types", "maximum_size"],
        title="Inputs",
    )
    print_table(
        [o.to_dict() for o in details.outputs],
        ["name", "media_type", "maximum_size"],
        title="Outputs",
    )


@model.command("sample")
@click.argument("model_id")
@click.argument("version")
@click.option("--kind", type=click.Choice(["input", "output"]), default="input", show_default=True)
@common_options
@handle_errors
def model_sample(
    model_id: str,
    version: str,
    kind: str,
    profile_name: Optional[str],
    output_format: OutputFormat,
) -> None:
    """Print the sample input or output of a model version."""
    with get_client(profile_name) as client:
        service = ModelService(client)
        if kind == "input":
            sample = service.get_input_sample(model_id, version)
        else:
            sample = service.get_output_sample(model_id, version)

    print_json(sample)


@model.command("tags")
@click.argument("tag_ids", nargs=-1)
@common_options
@handle_errors
def model_tags(
    tag_ids: tuple[str, ...],
    profile_name: Optional[str],
    output_format: OutputFormat,
) -> None:
    """List tags, or the models carrying the given tags.

    Example:
        modzyctl model tags
        modzyctl model tags computer_vision
    """
    with get_client(profile_name) as client:
        service = ModelService(client)
        if tag_ids:
            data = service.get_tags_and_models(*tag_ids)
        else:
            data = service.list_tags()

    if output_format == OutputFormat.JSON or tag_ids:
        print_json(data)
    else:
        print_table(data, ["identifier", "name"], title="Tags")
