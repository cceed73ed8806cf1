"""
Command-line interface for track-codec.

This module implements the CLI using Click, with rich-click for help
formatting and colors.

Commands:
    track-codec decode <track>...            Decode base64 tracks
    track-codec decode --file <tracks.txt>   Decode one base64 track per line
    track-codec encode <tracks.yaml>         Encode track info documents

Options:
    --config <path>                          Configuration file
    --verbose                                Show DEBUG messages
    --format [yaml|json]                     Output format (per command)
    --output <path>                          Write results to a file

Usage:
    # Inspect a track copied from a Lavalink response
    track-codec decode "QAAAjQIAJVJpY2sgQXN0bGV5..."

    # Decode a dump of tracks, one per line, as JSON
    track-codec decode --file tracks.txt --format json --output tracks.json

    # Re-encode (possibly edited) track info
    track-codec encode tracks.json

Exit Codes:
    0   success
    1   at least one track failed to decode or encode
    2   configuration error
    130 interrupted
"""

import json
import sys
from pathlib import Path
from typing import Any, Optional

import rich_click as click
import yaml
from tqdm import tqdm

# Configure rich-click for better help formatting
click.rich_click.USE_RICH_MARKUP = True
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.GROUP_ARGUMENTS_OPTIONS = True
click.rich_click.STYLE_ERRORS_SUGGESTION = "magenta italic"
click.rich_click.MAX_WIDTH = 100

from track_codec import __version__
from track_codec.codec import TrackInfo, decode, encode_base64
from track_codec.core import (
    Config,
    ConfigError,
    TrackCodecError,
    TrackDecodeError,
    TrackEncodeError,
    get_logger,
    load_config,
    log_decode_failure,
    setup_logging,
    shutdown_logging,
)
from track_codec.core.config import OUTPUT_FORMATS

logger = get_logger(__name__)


@click.group(invoke_without_command=True)
@click.option(
    "--config", "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    metavar="<track-codec.yaml>",
    help="Configuration file (default: ./track-codec.yaml if present)"
)
@click.option(
    "--verbose",
    is_flag=True,
    help="Show DEBUG messages on the console"
)
@click.option(
    "--version",
    is_flag=True,
    help="Show version and exit."
)
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path], verbose: bool, version: bool) -> None:
    """
    track-codec: Encode and decode Lavalink / Lavaplayer tracks.

    \b
    BASIC USAGE:
        track-codec decode "QAAAjQIAJVJpY2sg..."      # Print track info
        track-codec decode --file tracks.txt          # One track per line
        track-codec encode tracks.yaml                # Print base64 tracks
    """
    if version:
        click.echo(f"track-codec {__version__}")
        ctx.exit(0)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit(0)

    try:
        config = load_config(config_path)
    except ConfigError as e:
        click.echo(f"Configuration error: {e.message}", err=True)
        ctx.exit(2)

    level = "DEBUG" if verbose else config.logging.level
    setup_logging(config.logging.directory, level)
    ctx.call_on_close(shutdown_logging)

    ctx.ensure_object(dict)
    ctx.obj["config"] = config


@cli.command("decode")
@click.argument("tracks", nargs=-1, metavar="<track>...")
@click.option(
    "--file", "track_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    metavar="<tracks.txt>",
    help="Read base64 tracks from a file, one per line"
)
@click.option(
    "--format", "output_format",
    type=click.Choice(OUTPUT_FORMATS),
    default=None,
    help="Output format (overrides output.format)"
)
@click.option(
    "--output", "output_path",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    default=None,
    metavar="<path>",
    help="Write the result to a file instead of stdout"
)
@click.pass_context
def decode_command(
    ctx: click.Context,
    tracks: tuple[str, ...],
    track_file: Optional[Path],
    output_format: Optional[str],
    output_path: Optional[Path]
) -> None:
    """
    Decode base64 tracks into track info.

    Tracks that fail to decode are reported and skipped; the others are
    still printed. The exit code is 1 if any track failed.
    """
    config: Config = ctx.obj["config"]
    inputs = list(tracks)
    if track_file is not None:
        inputs.extend(_read_track_lines(track_file))

    if not inputs:
        raise click.UsageError("Provide at least one <track> or --file")

    logger.debug(f"Decoding {len(inputs)} tracks")

    decoded: list[dict[str, Any]] = []
    failed = 0
    for encoded in tqdm(inputs, desc="Decoding", unit="track", leave=False, disable=None):
        try:
            decoded.append(decode(encoded).to_dict())
        except TrackDecodeError as e:
            failed += 1
            log_decode_failure(logger, encoded, e)

    _emit(decoded, output_format or config.output.format, config.output.indent, output_path)

    if failed:
        logger.error(f"{failed} of {len(inputs)} tracks failed to decode")
        ctx.exit(1)


@cli.command("encode")
@click.argument(
    "source",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    metavar="<tracks.yaml>"
)
@click.option(
    "--output", "output_path",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    default=None,
    metavar="<path>",
    help="Write the result to a file instead of stdout"
)
@click.pass_context
def encode_command(ctx: click.Context, source: Path, output_path: Optional[Path]) -> None:
    """
    Encode track info from a YAML or JSON file into base64 tracks.

    The file holds one track info mapping or a list of them, with the
    camelCase keys printed by `decode`. One base64 track is printed per
    line, in file order.
    """
    try:
        documents = _load_track_documents(source)
    except TrackCodecError as e:
        click.echo(f"Error: {e.message}", err=True)
        ctx.exit(1)

    lines = []
    failed = 0
    for index, document in enumerate(documents):
        try:
            lines.append(encode_base64(TrackInfo.from_dict(document)))
        except TrackEncodeError as e:
            failed += 1
            logger.error(f"Track #{index + 1} could not be encoded: {e.message}")

    _write_text("".join(f"{line}\n" for line in lines), output_path)

    if failed:
        logger.error(f"{failed} of {len(documents)} tracks failed to encode")
        ctx.exit(1)


def _read_track_lines(path: Path) -> list[str]:
    """Read non-blank, stripped lines from a track list file."""
    with open(path, "r", encoding="utf-8") as f:
        return [line.strip() for line in f if line.strip()]


def _load_track_documents(path: Path) -> list[dict[str, Any]]:
    """
    Load track info mappings from a YAML or JSON file.

    JSON documents are valid YAML, so both go through yaml.safe_load.

    Raises:
        TrackEncodeError: If the file is not valid YAML or does not hold a
                          mapping or a list of mappings.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            content = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise TrackEncodeError(
            f"Invalid YAML/JSON in {path}: {e}",
            details={"file_path": str(path), "original_error": str(e)}
        ) from e

    if isinstance(content, dict):
        content = [content]

    if not isinstance(content, list) or not all(isinstance(item, dict) for item in content):
        raise TrackEncodeError(
            f"{path} must contain a track info mapping or a list of them",
            details={"file_path": str(path)}
        )

    return content


def _emit(
    tracks: list[dict[str, Any]],
    output_format: str,
    indent: int,
    output_path: Optional[Path]
) -> None:
    if output_format == "json":
        text = json.dumps(tracks, indent=indent, ensure_ascii=False) + "\n"
    else:
        text = yaml.safe_dump(tracks, sort_keys=False, allow_unicode=True)
    _write_text(text, output_path)


def _write_text(text: str, output_path: Optional[Path]) -> None:
    if output_path is None:
        click.echo(text, nl=False)
        return
    output_path.write_text(text, encoding="utf-8")
    logger.info(f"Wrote {output_path}")


def main() -> None:
    """
    Entry point for the CLI.

    This function is called when running `track-codec` from the command line.
    """
    try:
        cli()
    except KeyboardInterrupt:
        click.echo("\nInterrupted by user", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
