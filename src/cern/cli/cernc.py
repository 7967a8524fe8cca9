"""
cernc - cern Compiler Command-Line Interface
============================================

Compiles a cern source file to C++ and builds it with the system C++
compiler.

Usage Examples
--------------
Build an executable (writes main.cpp and app):
    $ cernc hello.ce

Choose the output names:
    $ cernc hello.ce -o hello --emit hello.cpp

Only generate C++:
    $ cernc -S hello.ce

Inspect the front end:
    $ cernc --tokens hello.ce
    $ cernc --ast hello.ce
"""

import logging
from pathlib import Path

import click

from cern import __version__
from cern.cli.errors import handle_cli_exception
from cern.lang import ASTPrinter, Compiler, CompilerOptions, DEFAULT_CAPACITY

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(name)s: %(message)s" if verbose else "%(message)s",
    )


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=Path("app"),
    show_default=True,
    help="Output executable",
)
@click.option(
    "--emit",
    type=click.Path(dir_okay=False, path_type=Path),
    default=Path("main.cpp"),
    show_default=True,
    help="Where to write the generated C++",
)
@click.option(
    "-S", "--no-build",
    is_flag=True,
    help="Generate C++ only, do not run the C++ compiler",
)
@click.option(
    "--ast",
    is_flag=True,
    help="Print the syntax tree and exit",
)
@click.option(
    "--tokens",
    is_flag=True,
    help="Print the token stream and exit",
)
@click.option(
    "--cxx",
    default="g++",
    show_default=True,
    help="C++ compiler to invoke",
)
@click.option(
    "--arena-capacity",
    type=click.IntRange(min=1),
    default=DEFAULT_CAPACITY,
    show_default=True,
    help="Maximum number of syntax tree nodes",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="cernc")
def main(
    input_file: Path,
    output: Path,
    emit: Path,
    no_build: bool,
    ast: bool,
    tokens: bool,
    cxx: str,
    arena_capacity: int,
    verbose: bool,
) -> None:
    """
    Compile a cern program.

    INPUT_FILE is the cern source file (.ce) to compile.

    \b
    Examples:
        cernc hello.ce                  # Writes main.cpp, builds ./app
        cernc hello.ce -o hello         # Name the executable
        cernc -S hello.ce               # C++ only
        cernc --ast hello.ce            # Dump the syntax tree
    """
    setup_logging(verbose)

    options = CompilerOptions(
        arena_capacity=arena_capacity,
        output_comments=True,
        cxx=cxx,
    )

    try:
        logger.debug("compiling %s with %s", input_file, options)
        compiler = Compiler(options)
        result = compiler.compile_file(input_file)

        if tokens:
            for token in result.tokens:
                click.echo(repr(token))
            return

        if ast:
            click.echo(ASTPrinter().print(result.program))
            return

        if no_build:
            emit.write_text(result.cpp_source, encoding="utf-8")
            click.echo(f"Generated {input_file} -> {emit}")
            return

        executable = compiler.build(result, emit, output)
        if verbose:
            click.echo(f"Tokenized: {result.token_count} tokens")
            click.echo(f"Parsed: {len(result.program.stmts)} statements, {result.node_count} nodes")
        click.echo(f"Compiled {input_file} -> {executable}")

    except Exception as e:
        handle_cli_exception(e, verbose)


if __name__ == "__main__":
    main()
