"""
CLI Error Handling
==================

Maps exceptions to messages on stderr and process exit codes.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click

from teeny.errors import TeenyError


class ExitCode(IntEnum):
    """Exit codes of the teenyc tool."""
    SUCCESS = 0
    COMPILE_ERROR = 1    # Lexical, syntax or semantic error in the source
    INVALID_ARGS = 2     # Invalid arguments, missing or undecodable files
    INTERNAL_ERROR = 3   # Unexpected internal error


def handle_cli_exception(error: Exception, verbose: bool = False) -> NoReturn:
    """
    Report an exception and exit with the matching exit code.

    Compiler errors are already formatted with location and hint, so
    they are printed as they are.

    Raises:
        SystemExit: Always
    """
    if isinstance(error, TeenyError):
        click.echo(str(error), err=True)
        sys.exit(ExitCode.COMPILE_ERROR)

    elif isinstance(error, (click.BadParameter, FileNotFoundError, PermissionError)):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    elif isinstance(error, UnicodeDecodeError):
        click.echo(f"Error: source file is not valid UTF-8 ({error})", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    else:
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()
        sys.exit(ExitCode.INTERNAL_ERROR)
