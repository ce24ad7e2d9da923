"""CLI error handling helpers."""

import logging

import click

from commtrack.domain.errors import DomainError

logger = logging.getLogger(__name__)


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    logger.debug("Command failed", exc_info=error)
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def parse_assignment(text: str) -> tuple[str, str]:
    """Split a FIELD=VALUE option value.

    Raises:
        click.BadParameter: If there is no '=' or the field name is blank
    """
    name, sep, value = text.partition("=")
    if not sep or not name.strip():
        raise click.BadParameter(f"expected FIELD=VALUE, got '{text}'", param_hint="--set")
    return name.strip(), value.strip()
