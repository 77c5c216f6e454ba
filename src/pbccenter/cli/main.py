"""
pbccenter Command Line Interface.

This module provides the ``pbccenter`` command, using Click for argument
parsing. The short flags follow the conventions of GROMACS-style tools.

Usage:
    pbccenter -c system.gro -o centered.gro
    pbccenter -c system.gro -f md.xtc -o centered.xtc -r Protein -s 10
    pbccenter -c system.gro -f md.xtc -o centered.xtc -n index.ndx -r Membrane -z
    pbccenter --settings center.yaml -o other.xtc
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

import click

from pbccenter import __version__
from pbccenter.config import AxisMask, CenteringConfig
from pbccenter.exceptions import CenteringError, ConfigurationError

LOGGER = logging.getLogger("pbccenter")


def _print_help(ctx: click.Context, param: click.Parameter, value: bool) -> None:
    """Print usage and exit with a non-zero status, like the other usage errors."""
    if not value or ctx.resilient_parsing:
        return
    click.echo(ctx.get_help())
    ctx.exit(1)


@click.command(
    context_settings={"help_option_names": []},
    epilog="Exit status is 0 on success and 1 on any error.",
)
@click.option(
    "-h",
    "--help",
    is_flag=True,
    is_eager=True,
    expose_value=False,
    callback=_print_help,
    help="Print this message and exit",
)
@click.option(
    "-c",
    "structure",
    type=click.Path(dir_okay=False),
    default=None,
    help="Structure (gro) file to read [required]",
)
@click.option(
    "-f",
    "trajectory",
    type=click.Path(dir_okay=False),
    default=None,
    help="Trajectory (xtc) file to read (optional)",
)
@click.option(
    "-n",
    "index",
    type=click.Path(dir_okay=False),
    default=None,
    help="Index (ndx) file to read (default: index.ndx)",
)
@click.option(
    "-o",
    "output",
    type=click.Path(dir_okay=False),
    default=None,
    help="Output file name [required]",
)
@click.option(
    "-r",
    "reference",
    default=None,
    help="Selection of atoms to center (default: Protein)",
)
@click.option(
    "-s",
    "skip",
    type=click.IntRange(min=1),
    default=None,
    help="Only center every Nth frame (default: 1)",
)
@click.option("-x", "center_x", is_flag=True, help="Center in the x dimension")
@click.option("-y", "center_y", is_flag=True, help="Center in the y dimension")
@click.option(
    "-z",
    "center_z",
    is_flag=True,
    help="Center in the z dimension (default without -x/-y/-z: center in xyz)",
)
@click.option(
    "--settings",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="YAML file with run settings; explicit flags take precedence",
)
@click.option(
    "--precision",
    type=click.IntRange(min=1, max=10),
    default=None,
    help="Decimal places kept in xtc output (default: 3)",
)
@click.option(
    "--progress-interval",
    type=click.IntRange(min=0),
    default=None,
    help="Report progress every N whole ps of simulation time; 0 disables (default: 10000)",
)
@click.option(
    "--save-reference",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write the resolved reference atoms as an index group to this file",
)
@click.option(
    "-q", "--quiet", is_flag=True, help="Suppress INFO messages, show warnings/errors only"
)
@click.option("--debug", is_flag=True, help="Enable DEBUG logging for troubleshooting")
@click.version_option(__version__, prog_name="pbccenter")
def cli(
    structure: Optional[str],
    trajectory: Optional[str],
    index: Optional[str],
    output: Optional[str],
    reference: Optional[str],
    skip: Optional[int],
    center_x: bool,
    center_y: bool,
    center_z: bool,
    settings: Optional[str],
    precision: Optional[int],
    progress_interval: Optional[int],
    save_reference: Optional[str],
    quiet: bool,
    debug: bool,
) -> int:
    """Center a reference group of atoms in the simulation box.

    Centers the structure (-c) or, when a trajectory (-f) is given, every
    Nth frame of the trajectory, so that the reference selection (-r) sits
    at the center of the box. The reference may straddle a periodic
    boundary; its center is computed with a circular mean along each axis.
    """
    from pbccenter.core.logging_utils import setup_logging
    from pbccenter.pipeline import console_progress, run_centering

    setup_logging(quiet=quiet, debug=debug)

    config = build_config(
        settings=settings,
        structure=structure,
        trajectory=trajectory,
        index=index,
        output=output,
        reference=reference,
        skip=skip,
        axes=AxisMask.from_flags(center_x, center_y, center_z)
        if (center_x or center_y or center_z)
        else None,
        precision=precision,
        progress_interval=progress_interval,
    )

    progress = None if quiet else console_progress
    summary = run_centering(
        config,
        progress=progress,
        save_reference=Path(save_reference) if save_reference else None,
    )

    if config.trajectory is not None and progress is not None:
        click.echo("")
    LOGGER.info(
        f"Done: {summary.frames_written} frame(s) written to {summary.output} "
        f"({summary.frames_read} read)"
    )
    return 0


def build_config(settings: Optional[str] = None, **options) -> CenteringConfig:
    """Merge a settings file with command line options into a config.

    Options that are None are taken from the settings file, or from the
    config defaults when no file is given.

    Raises
    ------
    ConfigurationError
        If the structure or output path is missing, or a value is invalid.
    """
    data = CenteringConfig.load_settings(settings) if settings else {}
    data.update({key: value for key, value in options.items() if value is not None})

    if not data.get("structure") or not data.get("output"):
        raise ConfigurationError("Structure file (-c) and output file (-o) must always be supplied.")

    return CenteringConfig.from_options(**data)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the command line interface and return the process exit status."""
    try:
        result = cli.main(
            args=list(argv) if argv is not None else None,
            prog_name="pbccenter",
            standalone_mode=False,
        )
    except click.ClickException as e:
        e.show()
        return 1
    except click.Abort:
        click.echo("Aborted!", err=True)
        return 1
    except CenteringError as e:
        LOGGER.error(str(e))
        return e.exit_code

    return result if isinstance(result, int) else 0


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
