"""Commission sheet scan command."""

import click

from commtrack.cli.error_handling import handle_domain_error
from commtrack.cli.record_options import echo_breakdown
from commtrack.config import Settings
from commtrack.domain.edit_session import EditSession
from commtrack.domain.errors import DomainError
from commtrack.domain.scan import DocumentScanService, VisionClient
from commtrack.domain.transaction import TransactionService


def get_vision_client(ctx: click.Context) -> VisionClient:
    """Return the injected vision client, or build one from settings.

    Raises:
        ConfigurationError: If OPENAI_API_KEY is not set
    """
    client = ctx.obj.get("vision_client")
    if client is not None:
        return client

    from commtrack.integrations.vision import OpenAIVisionClient

    settings: Settings = ctx.obj.get("settings") or Settings.from_env()
    return OpenAIVisionClient(
        settings.require_openai_key(),
        model=settings.scan_model,
        base_url=settings.scan_base_url,
    )


@click.command("scan")
@click.argument("image", type=click.Path(exists=True, dir_okay=False))
@click.option("--save", is_flag=True, help="Save the scanned transaction")
@click.pass_context
def scan(ctx, image: str, save: bool):
    """Read a transaction off a commission sheet image.

    Supports JPG, PNG and WebP images; convert PDFs to an image first.
    Every value found on the sheet is applied as if typed in, so figures
    printed on the sheet (GCI, NCI, ...) override the calculation.

    Examples:
        commtrack scan closing-statement.png
        commtrack scan closing-statement.png --save
    """
    try:
        service = DocumentScanService(get_vision_client(ctx))
        candidate = service.scan_file(image)
        session = EditSession.new()
        session.apply_candidate(candidate.fields)
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)

    txn = session.record
    click.echo(f"Scanned {image} (confidence {candidate.confidence}%)")
    if candidate.confidence < 70:
        click.echo("Warning: low confidence, check the values before saving", err=True)
    if txn.address:
        click.echo(f"  Address: {txn.address}")
    echo_breakdown(txn)

    if save:
        transaction_id = TransactionService(ctx.obj["db"]).save_session(session)
        click.echo(f"Created transaction {transaction_id}")


def register_commands(cli):
    """Register scan command with main CLI."""
    cli.add_command(scan)
