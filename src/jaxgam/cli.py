"""Command line tool for term diagnostics.

Usage:
    jaxgam-diagnose -d DATASET -i MODEL -o OUTPUT [-m L1|L2] [--delimiter ,] [-v]

Writes one line per term, ``[i, j]: weight``, largest weight first.
Exits with code 1 when the arguments cannot be parsed.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Optional

import typer

from jaxgam.core.exceptions import UnknownModeError
from jaxgam.data import read_instances
from jaxgam.diagnostics import DiagnosticsConfig, Mode, TermAggregator, rank_terms
from jaxgam.gam import load

USAGE_ERROR_EXIT_CODE = 2

app = typer.Typer(
    help="Generates term importance for additive models.",
    add_completion=False,
)


@app.command()
def diagnose_command(
    dataset: Path = typer.Option(..., "--dataset", "-d", exists=True, dir_okay=False, help="Dataset path"),
    input_model: Path = typer.Option(..., "--input-model", "-i", exists=True, dir_okay=False, help="Input model path"),
    output: Path = typer.Option(..., "--output", "-o", dir_okay=False, help="Output path"),
    mode: Optional[str] = typer.Option(None, "--mode", "-m", help="Mode (L1 or L2, default: L2)"),
    delimiter: Optional[str] = typer.Option(None, help="Dataset field separator (default: whitespace)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Print one line per term"),
):
    """Rank the terms of an additive model by importance."""
    try:
        parsed_mode = Mode.parse(mode)
    except UnknownModeError as e:
        raise typer.BadParameter(str(e), param_hint="'--mode' / '-m'") from e

    instances = read_instances(dataset, delimiter=delimiter)
    model = load(input_model)
    if verbose:
        typer.echo(
            f"Loaded {len(instances)} instances and {len(model)} components, "
            f"mode={parsed_mode.value}"
        )

    aggregator = TermAggregator(DiagnosticsConfig(mode=parsed_mode, verbose=verbose))
    weights = rank_terms(aggregator.diagnose(model, instances))

    with open(output, "w") as f:
        for element in weights:
            f.write(element.to_line() + "\n")
    if verbose:
        typer.echo(f"Wrote {len(weights)} terms to {output}")


def main(argv: Optional[List[str]] = None) -> int:
    """Run the tool and return its exit code.

    Usage errors (missing options, unknown mode, missing files) print
    the error and return 1.
    """
    try:
        app(args=argv, prog_name="jaxgam-diagnose")
    except SystemExit as e:
        if e.code is None:
            return 0
        if not isinstance(e.code, int):
            typer.echo(e.code, err=True)
            return 1
        # typer exits with 2 on usage errors
        return 1 if e.code == USAGE_ERROR_EXIT_CODE else e.code
    return 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
