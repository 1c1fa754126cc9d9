"""CLI for azure-blob-provider maintenance tasks."""

import shutil
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from .config import load_settings
from .context import BlobStorageContext
from .errors import BlobProviderError, NotFoundError
from .storage import AzureBlobProvider, make_blob_provider
from .storage_models import ProviderData, serialize_provider_data
from .utils import humanize_size, iter_chunks


app = typer.Typer(help="""\
Maintenance commands for the Azure blob provider: list, inspect, upload,
download and delete blobs in a tenant's container.""")

console = Console()


@app.callback()
def main(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML provider config"),
    tenant: Optional[str] = typer.Option(None, "--tenant", "-t", help="Tenant id (overrides config)"),
):
    """Azure blob provider maintenance."""
    ctx.obj = {"config": config, "tenant": tenant}


def _get_provider(ctx: typer.Context) -> AzureBlobProvider:
    """Build a provider from config and environment.

    Raises:
        typer.Exit: If the configuration is invalid
    """
    opts = ctx.obj or {}
    try:
        settings = load_settings(opts.get("config"))
        if opts.get("tenant") is not None:
            settings = settings.model_copy(update={"tenant_id": opts["tenant"]})
        return make_blob_provider(settings)
    except (ValueError, FileNotFoundError, BlobProviderError) as e:
        console.print(f"[red]✗[/red] {e}")
        raise typer.Exit(1)


def _fail(e: Exception) -> None:
    console.print(f"[red]✗[/red] {e}")
    raise typer.Exit(1)


@app.command("ls")
def list_blobs(ctx: typer.Context):
    """List blob ids in the container."""
    with _get_provider(ctx) as provider:
        count = 0
        try:
            for blob_id in provider.get_blob_ids():
                console.print(blob_id)
                count += 1
        except BlobProviderError as e:
            _fail(e)
        console.print(f"[dim]{count} blob(s) in {provider.container_name}[/dim]")


@app.command()
def exists(ctx: typer.Context, blob_id: str = typer.Argument(..., help="Blob id")):
    """Check whether a blob exists (exit code 1 if not)."""
    with _get_provider(ctx) as provider:
        try:
            found = provider.blob_exists(blob_id)
        except BlobProviderError as e:
            _fail(e)
    if found:
        console.print(f"[green]✓[/green] {blob_id} exists")
    else:
        console.print(f"[yellow]✗[/yellow] {blob_id} not found")
        raise typer.Exit(1)


@app.command()
def rm(ctx: typer.Context, blob_id: str = typer.Argument(..., help="Blob id")):
    """Delete a blob."""
    with _get_provider(ctx) as provider:
        try:
            context = BlobStorageContext(provider_data=ProviderData(blob_id=blob_id))
            provider.delete(context)
        except NotFoundError as e:
            console.print(f"[yellow]✗[/yellow] {e}")
            raise typer.Exit(1)
        except (BlobProviderError, ValueError) as e:
            _fail(e)
    console.print(f"[green]✓[/green] Deleted {blob_id}")


@app.command()
def put(
    ctx: typer.Context,
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="File to upload"),
    blob_id: Optional[str] = typer.Option(None, "--blob-id", help="Reuse this blob id"),
    file_id: int = typer.Option(0, "--file-id", help="fileId metadata"),
    version_id: int = typer.Option(0, "--version-id", help="versionId metadata"),
    property_type_id: int = typer.Option(0, "--property-type-id", help="propertyTypeId metadata"),
):
    """Upload a file with the chunked protocol and print its provider data."""
    size = file.stat().st_size
    with _get_provider(ctx) as provider:
        try:
            context = BlobStorageContext(
                length=size,
                provider_data=ProviderData(blob_id=blob_id) if blob_id else None,
                file_id=file_id,
                version_id=version_id,
                property_type_id=property_type_id,
            )
            data = provider.allocate(context)
            chunks = 0
            with file.open("rb") as f:
                for offset, chunk in iter_chunks(f, data.chunk_size):
                    provider.write(context, offset, chunk)
                    chunks += 1
        except (BlobProviderError, ValueError) as e:
            _fail(e)

    table = Table(show_header=False, box=None)
    table.add_row("Blob", data.blob_id)
    table.add_row("Size", humanize_size(size))
    table.add_row("Chunks", f"{chunks} x {humanize_size(data.chunk_size)}")
    console.print(table)
    # Plain line so the provider data can be captured by scripts
    typer.echo(serialize_provider_data(data))


@app.command()
def get(
    ctx: typer.Context,
    provider_data: str = typer.Argument(..., help='Provider data, e.g. \'{"BlobId":"...","ChunkSize":262144}\''),
    dest: Path = typer.Argument(..., help="Destination file"),
):
    """Download a blob through a read stream."""
    with _get_provider(ctx) as provider:
        try:
            data = provider.parse_data(provider_data)
            context = BlobStorageContext(provider_data=data)
            dest.parent.mkdir(parents=True, exist_ok=True)
            with provider.get_stream_for_read(context) as stream, dest.open("wb") as f:
                shutil.copyfileobj(stream, f, data.chunk_size or provider.chunk_size)
                size = stream.length
        except BlobProviderError as e:
            _fail(e)
    console.print(f"[green]✓[/green] Downloaded {data.blob_id} ({humanize_size(size)}) to {dest}")


if __name__ == "__main__":
    app()
