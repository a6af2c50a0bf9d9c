"""Explore commands -- read-only views of the loaded spec.

``apiplay endpoints`` lists operations grouped by their first tag in the
document's tag order; ``show``, ``schemas`` and ``sample`` drill into a
single operation or the component schemas.
"""

from __future__ import annotations

import typer

from apiplay.commands import exit_on_error, load_playground, require_endpoint
from apiplay.output import get_output
from apiplay.parser import group_endpoints_by_tag
from apiplay.request import build_sample_body


def list_endpoints(ctx: typer.Context) -> None:
    """List all endpoints, grouped by tag.

    Example::

        apiplay --spec openapi.yaml endpoints
    """
    with exit_on_error():
        _, spec = load_playground(ctx)

    groups = group_endpoints_by_tag(spec.endpoints, spec.tags)
    headers = ["Tag", "Method", "Path", "Operation", "Summary"]
    rows: list[list[str]] = []
    for group in groups:
        for endpoint in group.endpoints:
            summary = endpoint.summary or "-"
            if endpoint.deprecated:
                summary += " (deprecated)"
            rows.append([
                group.tag.name,
                endpoint.method.value,
                endpoint.path,
                endpoint.operation_id,
                summary,
            ])

    get_output().print_table(
        headers,
        rows,
        title=f"{spec.info.title} {spec.info.version} -- Endpoints ({len(rows)})",
    )


def show_endpoint(
    ctx: typer.Context,
    operation_id: str = typer.Argument(..., help="operationId to show."),
) -> None:
    """Show parameters, request body and responses of one endpoint."""
    with exit_on_error():
        _, spec = load_playground(ctx)
        endpoint = require_endpoint(spec, operation_id)

    get_output().format_json(
        endpoint.model_dump(mode="json", by_alias=True, exclude_unset=True)
    )


def list_schemas(ctx: typer.Context) -> None:
    """List component schemas with their type and first few properties."""
    with exit_on_error():
        _, spec = load_playground(ctx)

    output = get_output()
    if not spec.schemas:
        output.info("No schemas defined in this spec.")
        return

    rows: list[list[str]] = []
    for name, schema in spec.schemas.items():
        prop_names = list((schema.properties or {}).keys())
        props = ", ".join(prop_names[:5])
        if len(prop_names) > 5:
            props += "..."
        rows.append([name, schema.type or "-", props or "-"])

    output.print_table(["Schema", "Type", "Properties"], rows, title=f"Schemas ({len(rows)})")


def sample_body(
    ctx: typer.Context,
    operation_id: str = typer.Argument(..., help="operationId whose body to sample."),
) -> None:
    """Print a sample request body for an endpoint."""
    with exit_on_error():
        _, spec = load_playground(ctx)
        endpoint = require_endpoint(spec, operation_id)

    output = get_output()
    if endpoint.request_body is None:
        output.info(f"{operation_id} declares no request body.")
        return
    output.format_json(build_sample_body(endpoint.request_body.schema_))
