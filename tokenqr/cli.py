"""CLI entry point for tokenqr.

Commands:
    tokenqr encode DATA   Encode arbitrary data as a QR-code
    tokenqr token TOKEN   Encode a 32 character hex session token
    tokenqr capacity      Byte capacity of every version at a level
"""

from __future__ import annotations

import logging
from pathlib import Path

import click

from . import phrasecoder
from . import qrcoder
from . import render
from . import rsblock
from . import tokens
from .config import OUTPUT_FORMATS, AppConfig, load_config
from .errors import QRError

logger = logging.getLogger(__name__)

LEVELS = click.Choice(["L", "M", "Q", "H"], case_sensitive=False)


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _output_options(func):
    func = click.option("--border", "-b", type=int, default=None,
                        help="Quiet zone width in modules (default: 4)")(func)
    func = click.option("--cell-px", type=int, default=None,
                        help="Pixels per module for png output (default: 8)")(func)
    func = click.option("--output", "-o", type=click.Path(dir_okay=False), default=None,
                        help="Write to this file instead of stdout")(func)
    func = click.option("--format", "-f", "output_format",
                        type=click.Choice(OUTPUT_FORMATS), default=None,
                        help="Output format (default: text)")(func)
    return func


def _apply_output_options(config: AppConfig, output_format: str | None,
                          cell_px: int | None, border: int | None) -> None:
    if output_format is not None:
        config.output_format = output_format
    if cell_px is not None:
        config.cell_px = cell_px
    if border is not None:
        config.border = border
    try:
        config.validate()
    except ValueError as e:
        raise click.BadParameter(str(e))


def _emit(qr: qrcoder.encode, config: AppConfig, output: str | None) -> None:
    version, level = qr.get_version_level()
    logger.debug("Encoded version %d level %s mask %d (%dx%d)",
                 version, level, qr.get_mask(), qr.get_dimension(), qr.get_dimension())

    matrix = qr.get_matrix()

    if config.output_format == "png":
        if output is None:
            raise click.UsageError("png output needs --output")
        render.to_image(matrix, config.cell_px, config.border).save(output, format="PNG")
        click.echo(f"Wrote {output}")
        return

    if config.output_format == "html":
        text = render.to_html_table(matrix)
    else:
        text = render.to_text(matrix, config.border)

    if output is None:
        click.echo(text)
    else:
        Path(output).write_text(text + "\n", encoding="utf-8")
        click.echo(f"Wrote {output}")


@click.group()
@click.option("--config", "-c", type=click.Path(), default=None,
              help="Path to config file")
@click.option("--verbose", "-v", is_flag=True, default=False,
              help="Enable verbose/debug logging")
@click.pass_context
def cli(ctx: click.Context, config: str | None, verbose: bool) -> None:
    """tokenqr: QR-code encoder for session tokens and other byte strings."""
    ctx.ensure_object(dict)
    try:
        app_config = load_config(config)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--config")
    ctx.obj["config"] = app_config
    _setup_logging("DEBUG" if verbose else app_config.log_level)


@cli.command()
@click.argument("data")
@click.option("--level", "-l", type=LEVELS, default=None,
              help="Error correction level (default: Q)")
@click.option("--version", "-V", "version", type=click.IntRange(1, 40), default=None,
              help="Force a QR-code version (default: smallest that fits)")
@_output_options
@click.pass_context
def encode(ctx: click.Context, data: str, level: str | None, version: int | None,
           output_format: str | None, output: str | None,
           cell_px: int | None, border: int | None) -> None:
    """Encode DATA in byte mode."""
    config: AppConfig = ctx.obj["config"]
    if level is not None:
        config.ecc_level = level.upper()
    if version is not None:
        config.version = version
    _apply_output_options(config, output_format, cell_px, border)

    try:
        qr = qrcoder.make_qr(data, config.ecc_level, config.version, config.encoding)
    except QRError as e:
        raise click.ClickException(str(e))

    _emit(qr, config, output)


@cli.command()
@click.argument("token")
@_output_options
@click.pass_context
def token(ctx: click.Context, token: str, output_format: str | None,
          output: str | None, cell_px: int | None, border: int | None) -> None:
    """Encode a 32 character hexadecimal session TOKEN at level Q."""
    config: AppConfig = ctx.obj["config"]
    _apply_output_options(config, output_format, cell_px, border)

    try:
        qr = tokens.encode_token(token)
    except QRError as e:
        raise click.ClickException(str(e))

    _emit(qr, config, output)


@cli.command()
@click.option("--level", "-l", type=LEVELS, default=None,
              help="Error correction level (default: from config)")
@click.pass_context
def capacity(ctx: click.Context, level: str | None) -> None:
    """Print the byte mode capacity of versions 1 to 40."""
    config: AppConfig = ctx.obj["config"]
    level = (level or config.ecc_level).upper()

    click.echo(f"{'version':>7} {'size':>7} {'bytes':>6}")
    for version in range(1, rsblock.QR_MAX_VERSION + 1):
        side = qrcoder.encode.get_dimension_by_version(version)
        max_len = phrasecoder.encode.get_max_length(version, level)
        click.echo(f"{version:>7} {side:>3}x{side:<3} {max_len:>6}")


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
