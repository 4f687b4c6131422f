"""CLI entry point: hubscan.

Subcommands:
    hubscan scan App.exe                  # upload if HUBSCAN_URL is set, else print
    hubscan scan App.exe scan.json        # write the scan document to a file
    hubscan scan App.exe --no-upload      # always print to stdout
"""

from __future__ import annotations

import sys
from pathlib import Path

import click
import structlog

from hubscan.core.config import HubSettings
from hubscan.core.logging import setup_logging
from hubscan.engines.binary_scanner.blacklist import Blacklist
from hubscan.engines.binary_scanner.scanner import scan as scan_artifact
from hubscan.engines.hub_upload.client import UploadClient
from hubscan.exceptions import HubScanError

log = structlog.get_logger("hubscan.cli")


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
def main(verbose: bool) -> None:
    """hubscan: inventory .NET binary dependencies for the Hub."""
    setup_logging("DEBUG" if verbose else None)


@main.command("scan")
@click.argument("target", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("output", required=False, type=click.Path(dir_okay=False, path_type=Path))
@click.option(
    "--blacklist",
    "blacklist_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="JSON object of {sha1: file name} to leave out (default: $HUBSCAN_BLACKLIST)",
)
@click.option(
    "--probe-dir",
    "probe_dirs",
    multiple=True,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Extra directory to search for referenced assemblies (repeatable)",
)
@click.option("--upload/--no-upload", default=True, help="Upload when HUBSCAN_URL is set")
def scan(
    target: Path,
    output: Path | None,
    blacklist_file: Path | None,
    probe_dirs: tuple[Path, ...],
    upload: bool,
) -> None:
    """Scan TARGET and write or upload its dependency inventory."""
    settings = HubSettings.from_env()
    target = target.resolve()
    click.echo(f"Scanning {target}...", err=True)

    try:
        blacklist_path = blacklist_file or settings.blacklist_path
        blacklist = Blacklist.from_file(blacklist_path) if blacklist_path else Blacklist.empty()

        report = scan_artifact(
            target,
            blacklist=blacklist,
            probe_dirs=[*probe_dirs, *settings.probe_dirs],
        )

        if output is not None:
            with open(output, "wb") as sink:
                report.serialize(sink)
            click.echo(f"Scan written to {output}", err=True)
        elif upload and settings.upload_enabled:
            client = UploadClient(settings.url)  # type: ignore[arg-type]
            client.upload_report(settings.username, settings.password, report)
            click.echo(f"Scan uploaded to {settings.url}", err=True)
        else:
            stdout = click.get_binary_stream("stdout")
            report.serialize(stdout)
            stdout.flush()
    except (HubScanError, OSError, ValueError) as e:
        log.debug("cli.failed", exc_info=True)
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(
        f"{len(report.files)} file(s), {len(report.problems)} problem(s)", err=True
    )


if __name__ == "__main__":
    main()
