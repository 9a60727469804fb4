"""
Teeny Compiler Main Module
==========================

This module provides the main compiler interface for Teeny. It wires the
lexer, parser and emitter together and wraps the outcome in a
CompilerResult:

    Source → Lexer ⇄ Parser → Emitter → C source

The three stages run interleaved in a single pass: the parser pulls each
token from the lexer when it needs it and pushes C fragments into the
emitter as soon as a construct is recognized.

Usage
-----
Command line:
    $ teenyc count.teeny -o count.c

Programmatic:
    >>> from teeny.compiler import compile_teeny
    >>> c_source = compile_teeny('PRINT "hello"')

Error Handling
--------------
Inside the pipeline every error is raised where it is detected and
aborts the compilation. ``TeenyCompiler.compile_source`` turns such an
error into a failed CompilerResult, so callers can branch on
``result.success`` instead of catching exceptions. ``compile_teeny`` and
``compile_file`` re-raise it.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from teeny.errors import TeenyError
from teeny.compiler.lexer import Lexer
from teeny.compiler.parser import Parser
from teeny.compiler.emitter import Emitter


logger = logging.getLogger(__name__)


@dataclass
class CompilerOptions:
    """
    Compiler configuration options.

    Attributes:
        print_precision: Digits after the decimal point when PRINT
                         outputs a number (the "2" of "%.2f")
        output_suffix: Extension used for the default output file
    """
    print_precision: int = 2
    output_suffix: str = ".c"

    def __post_init__(self):
        if self.print_precision < 0:
            raise ValueError(f"print_precision must be >= 0, got {self.print_precision}")

    @classmethod
    def from_env(cls) -> "CompilerOptions":
        """
        Create CompilerOptions from environment variables.

        Environment variables (all optional):
            TEENY_PRINT_PRECISION: Digits after the point (integer >= 0)
            TEENY_OUTPUT_SUFFIX: Default output extension (e.g. ".c")

        Invalid values are ignored.
        """
        options = cls()

        if precision := os.environ.get("TEENY_PRINT_PRECISION"):
            try:
                value = int(precision)
            except ValueError:
                logger.warning(f"Ignoring invalid TEENY_PRINT_PRECISION={precision!r}")
            else:
                if value >= 0:
                    options.print_precision = value

        if suffix := os.environ.get("TEENY_OUTPUT_SUFFIX"):
            if suffix.startswith("."):
                options.output_suffix = suffix
            else:
                logger.warning(f"Ignoring invalid TEENY_OUTPUT_SUFFIX={suffix!r}")

        return options


@dataclass
class CompilerResult:
    """
    Result of a compilation.

    Attributes:
        filename: Source filename
        success: True if compilation succeeded
        output: Generated C code (empty unless successful)
        error: The error that aborted compilation, if any
        token_count: Number of tokens read before finishing or failing
        variables: Declared variable names, sorted
        labels: Declared label names, in declaration order
    """
    filename: str = ""
    success: bool = False
    output: str = ""
    error: Optional[TeenyError] = None
    token_count: int = 0
    variables: list[str] = field(default_factory=list)
    labels: list[str] = field(default_factory=list)

    def raise_if_failed(self) -> None:
        """Re-raise the compilation error of a failed result."""
        if self.error is not None:
            raise self.error


class TeenyCompiler:
    """
    Teeny to C compiler.

    Example:
        compiler = TeenyCompiler()
        result = compiler.compile_file("count.teeny")
        if result.success:
            compiler.write_output(result, "count.c")
        else:
            print(result.error)

    Attributes:
        options: Compiler configuration options
    """

    def __init__(self, options: Optional[CompilerOptions] = None):
        self.options = options or CompilerOptions()

    def compile_source(self, source: str, filename: str = "<input>") -> CompilerResult:
        """
        Compile Teeny source code to C.

        Args:
            source: Teeny source code string
            filename: Source filename for error messages

        Returns:
            CompilerResult; on failure ``error`` holds the TeenyError
            and ``output`` is empty.
        """
        result = CompilerResult(filename=filename)

        emitter = Emitter()
        parser: Optional[Parser] = None

        try:
            # Filling the lookahead already reads tokens, so this can fail too
            parser = Parser(
                Lexer(source, filename),
                emitter,
                print_precision=self.options.print_precision,
            )
            parser.program()
        except TeenyError as e:
            logger.debug(f"Compilation of {filename} failed: {e.message}")
            result.error = e
        else:
            result.output = emitter.finalize()
            result.success = True
            logger.info(
                f"Compiled {filename}: {parser.token_count} tokens, "
                f"{len(parser.symbols)} variables, {len(parser.labels_declared)} labels"
            )

        if parser is not None:
            result.token_count = parser.token_count
            result.variables = sorted(parser.symbols)
            result.labels = list(parser.labels_declared)
        return result

    def compile_file(self, filepath: str | Path) -> CompilerResult:
        """
        Compile a Teeny source file.

        Raises:
            FileNotFoundError: If source file not found
        """
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"Source file not found: {filepath}")

        source = path.read_text(encoding="utf-8")
        return self.compile_source(source, str(filepath))

    def default_output_path(self, filepath: str | Path) -> Path:
        """Return the source path with the configured output suffix."""
        return Path(filepath).with_suffix(self.options.output_suffix)

    def write_output(self, result: CompilerResult, output_path: str | Path) -> Path:
        """
        Write the generated C code of a successful result.

        Raises:
            TeenyError: If the result is a failed compilation
        """
        result.raise_if_failed()
        path = Path(output_path)
        path.write_text(result.output, encoding="utf-8")
        logger.debug(f"Wrote {len(result.output)} bytes to {path}")
        return path


# =============================================================================
# Convenience Functions
# =============================================================================

def compile_teeny(
    source: str,
    filename: str = "<input>",
    options: Optional[CompilerOptions] = None,
) -> str:
    """
    Compile Teeny source code to C.

    Raises:
        TeenyError: If compilation fails

    Example:
        >>> print(compile_teeny("LET a = 5"))
        #include <stdio.h>
        int main(void) {
        float t_a;
        t_a = 5;
        return 0;
        }
    """
    result = TeenyCompiler(options).compile_source(source, filename)
    result.raise_if_failed()
    return result.output


def compile_file(
    filepath: str | Path,
    output_path: Optional[str | Path] = None,
    options: Optional[CompilerOptions] = None,
) -> str:
    """
    Compile a Teeny source file to C, optionally writing the result.

    Raises:
        TeenyError: If compilation fails
        FileNotFoundError: If source file not found
    """
    compiler = TeenyCompiler(options)
    result = compiler.compile_file(filepath)
    result.raise_if_failed()

    if output_path:
        compiler.write_output(result, output_path)

    return result.output
