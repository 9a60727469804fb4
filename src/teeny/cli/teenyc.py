"""
teenyc - Teeny Compiler Command-Line Interface
==============================================

Compiles a Teeny source file to C.

Usage Examples
--------------
Basic compilation (writes count.c):
    $ teenyc count.teeny

With output file:
    $ teenyc count.teeny -o build/count.c

Print numbers with four decimals:
    $ teenyc -p 4 count.teeny

Show the token stream:
    $ teenyc --tokens count.teeny

Full pipeline to an executable:
    $ teenyc count.teeny && cc count.c -o count
"""

import logging
from pathlib import Path
from typing import Optional

import click

from teeny import __version__
from teeny.compiler import TeenyCompiler, CompilerOptions, Lexer
from teeny.cli.errors import handle_cli_exception


@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output C file (default: input file with .c suffix)",
)
@click.option(
    "-p", "--precision",
    type=click.IntRange(min=0),
    default=None,
    help="Digits after the decimal point when printing numbers (default: 2)",
)
@click.option(
    "--tokens",
    is_flag=True,
    help="Print the token stream and exit (for debugging)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output, including the parser trace",
)
@click.version_option(version=__version__, prog_name="teenyc")
def main(
    input_file: Path,
    output: Optional[Path],
    precision: Optional[int],
    tokens: bool,
    verbose: bool,
) -> None:
    """
    Compile a Teeny program to C.

    INPUT_FILE is the Teeny source file to compile.

    \b
    Examples:
        teenyc count.teeny              # Outputs count.c
        teenyc count.teeny -o out.c     # Specify output file
        teenyc --tokens count.teeny     # Dump tokens

    \b
    Language summary:
        LET x = expr          PRINT expr | PRINT "text"
        INPUT x               IF cond THEN ... ENDIF
        LABEL name            WHILE cond REPEAT ... ENDWHILE
        GOTO name             # comment
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    options = CompilerOptions.from_env()
    if precision is not None:
        options.print_precision = precision

    compiler = TeenyCompiler(options)

    try:
        if tokens:
            source = input_file.read_text(encoding="utf-8")
            for token in Lexer(source, str(input_file)):
                click.echo(repr(token))
            return

        if output is None:
            output = compiler.default_output_path(input_file)

        if verbose:
            click.echo(f"Compiling {input_file}...")

        result = compiler.compile_file(input_file)
        compiler.write_output(result, output)

        if verbose:
            click.echo(f"Tokenized: {result.token_count} tokens")
            click.echo(f"Variables: {', '.join(result.variables) or '(none)'}")
            click.echo(f"Labels: {', '.join(result.labels) or '(none)'}")
            click.echo(f"Wrote {len(result.output)} bytes to {output}")

        click.echo(f"Compiled {input_file} -> {output}")

    except Exception as e:
        handle_cli_exception(e, verbose=verbose)


if __name__ == "__main__":
    main()
