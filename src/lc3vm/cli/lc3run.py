"""
lc3run - LC-3 Virtual Machine Command-Line Interface
====================================================

Loads a raw program image into memory at $3000 and runs it until the
program executes TRAP HALT. Before each instruction a trace line with PC,
condition flags, R0-R7, the raw instruction word and its opcode is
printed to stdout. Log messages go to stderr.

Usage Examples
--------------
Run a program:
    $ lc3run program.bin

Run without the per-instruction trace:
    $ lc3run program.bin --no-trace

Image stored as big-endian words:
    $ lc3run program.bin --byte-order big

Guard against programs that never halt:
    $ lc3run program.bin --max-steps 100000
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from lc3vm import __version__
from lc3vm.cli.errors import ExitCode, handle_cli_exception
from lc3vm.emulator import (
    PROGRAM_ORIGIN,
    ByteOrder,
    Machine,
    MachineConfig,
    NullTrace,
    TextTrace,
)

logger = logging.getLogger(__name__)


def parse_address(value: str) -> int:
    """
    Parse an address given as 0x-prefixed hex, $-prefixed hex or decimal.

    Raises:
        click.BadParameter: If the text is not a number in 0-0xFFFF
    """
    try:
        if value.lower().startswith("0x"):
            address = int(value, 16)
        elif value.startswith("$"):
            address = int(value[1:], 16)
        else:
            address = int(value)
    except ValueError:
        raise click.BadParameter(f"invalid address '{value}'") from None

    if not 0 <= address <= 0xFFFF:
        raise click.BadParameter("address must be 0-65535 (0x0000-0xFFFF)")
    return address


def setup_logging(verbose: bool) -> None:
    """Configure logging to stderr based on verbosity."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
        stream=sys.stderr,
        force=True,
    )


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "image",
    type=click.Path(dir_okay=False, path_type=Path),
)
@click.option(
    "--origin",
    type=str,
    default=f"0x{PROGRAM_ORIGIN:04X}",
    help="Load and start address (hex with 0x prefix or decimal). Default: 0x3000",
)
@click.option(
    "--byte-order",
    type=click.Choice([b.value for b in ByteOrder]),
    default=ByteOrder.NATIVE.value,
    help="How image byte pairs form words (default: native)",
)
@click.option(
    "--max-steps",
    type=click.IntRange(min=1),
    default=None,
    help="Stop after this many instructions (default: run until HALT)",
)
@click.option(
    "--trace/--no-trace",
    default=True,
    help="Print a line per instruction before it executes (default: on)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose logging",
)
@click.version_option(version=__version__, prog_name="lc3run")
def main(
    image: Path,
    origin: str,
    byte_order: str,
    max_steps: Optional[int],
    trace: bool,
    verbose: bool,
) -> None:
    """
    Run an LC-3 program image.

    IMAGE is the raw binary image. It is copied into memory at the origin
    with no header, two bytes per word.

    Examples:

        lc3run hello.bin

        lc3run hello.bin --no-trace --byte-order big
    """
    setup_logging(verbose)

    try:
        config = MachineConfig(
            origin=parse_address(origin),
            byte_order=ByteOrder(byte_order),
            max_steps=max_steps,
        )
        machine = Machine(config, trace=TextTrace() if trace else NullTrace())
        machine.load_file(image)
        steps = machine.run()
    except Exception as e:
        handle_cli_exception(e, verbose)

    logger.debug(f"Executed {steps} instructions")
    sys.exit(ExitCode.SUCCESS)


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
