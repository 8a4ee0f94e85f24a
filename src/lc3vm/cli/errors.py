"""
Unified CLI Error Handling
==========================

Provides consistent error messages and exit codes for the CLI tools.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click

from lc3vm.errors import DecodeError, LC3Error


class ExitCode(IntEnum):
    """Standard exit codes for CLI tools."""
    SUCCESS = 0
    RUNTIME_ERROR = 1    # Image could not be loaded or the VM failed
    INVALID_ARGS = 2     # Invalid or missing arguments
    INTERNAL_ERROR = 3   # Unexpected internal error


def handle_cli_exception(error: Exception, verbose: bool = False) -> NoReturn:
    """
    Report an exception and exit with the matching exit code.

    Args:
        error: The exception that was raised
        verbose: If True, print a traceback for internal errors

    Raises:
        SystemExit: Always
    """
    if isinstance(error, DecodeError):
        # Decoder invariant broken: an emulator bug, not a user error
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()
        sys.exit(ExitCode.INTERNAL_ERROR)

    elif isinstance(error, LC3Error):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.RUNTIME_ERROR)

    elif isinstance(error, click.BadParameter):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    else:
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()
        sys.exit(ExitCode.INTERNAL_ERROR)
