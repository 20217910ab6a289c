"""Command-line entrypoints for chembalance."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer

from chembalance.balancer import balance_equation
from chembalance.config import configure_logging, load_settings
from chembalance.errors import ChemBalanceError
from chembalance.mass import format_formula_mass, formula_mass
from chembalance.oxidation import assign_oxidation_numbers
from chembalance.parser import parse_compound
from chembalance.persistence import sqlite_store

app = typer.Typer(add_completion=False)


@app.callback()
def main(
    log_level: Annotated[
        str | None, typer.Option(help="Logging level (defaults to CHEMBALANCE_LOG_LEVEL).")
    ] = None,
) -> None:
    """Balance chemical equations and inspect formulas."""
    configure_logging(log_level or load_settings().log_level)


@app.command()
def balance(
    equation: Annotated[str, typer.Argument(help='Equation such as "Fe + O2 -> Fe2O3".')],
    as_json: Annotated[bool, typer.Option("--json", help="Print the result as JSON.")] = False,
    history: Annotated[
        Path | None,
        typer.Option(help="Optional history database to record the result in."),
    ] = None,
    session: Annotated[
        str | None, typer.Option(help="Session name to record the result under.")
    ] = None,
    validate_coefficients: Annotated[
        bool, typer.Option(help="Check leading coefficients given in the equation.")
    ] = False,
) -> None:
    """Balance an equation and print the derivation steps."""
    settings = load_settings()
    result = balance_equation(
        equation, validate_coefficients=validate_coefficients or settings.validate_coefficients
    )

    history = history or settings.history_path
    if history is not None:
        connection = sqlite_store.connect(history)
        sqlite_store.ensure_schema(connection)
        session_id = sqlite_store.session_for(connection, session) if session else None
        sqlite_store.save_balance(connection, session_id=session_id, equation=equation, result=result)
        connection.close()

    if as_json:
        typer.echo(json.dumps(result.to_dict(), indent=2))
    else:
        for step in result.steps:
            typer.echo(step)


@app.command()
def oxidation(
    formula: Annotated[str, typer.Argument(help='Species such as "Cr2O7^2-".')],
    as_json: Annotated[bool, typer.Option("--json", help="Print the result as JSON.")] = False,
) -> None:
    """Show composition, charge and oxidation numbers of a species."""
    try:
        compound = parse_compound(formula)
    except ChemBalanceError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    numbers = assign_oxidation_numbers(compound)

    if as_json:
        payload = {
            "formula": compound.formula,
            "charge": compound.charge,
            "composition": dict(compound.composition),
            "oxidation_numbers": numbers,
        }
        typer.echo(json.dumps(payload, indent=2))
        return
    typer.echo(f"Species: {compound.label}")
    typer.echo(f"Charge: {compound.charge}")
    for element, count in compound.composition.items():
        typer.echo(f"  {element}: x{count}, oxidation number {numbers[element]:+d}")


@app.command()
def mass(
    formulas: Annotated[str, typer.Argument(help='Comma-separated formulas such as "H2O, Fe2O3".')],
) -> None:
    """Print the gram formula mass of each formula."""
    failed = False
    blocks = []
    for text in (part.strip() for part in formulas.split(",")):
        if not text:
            continue
        try:
            blocks.append(format_formula_mass(formula_mass(text)))
        except ChemBalanceError as exc:
            blocks.append(f"Formula: {text}\n  Error: {exc}")
            failed = True
    typer.echo("\n\n".join(blocks))
    if failed:
        raise typer.Exit(code=1)


@app.command()
def history(
    history_file: Annotated[Path, typer.Argument(help="History database.")],
    limit: Annotated[int, typer.Option(help="Number of entries to show.")] = 20,
    session: Annotated[str | None, typer.Option(help="Only show entries of this session.")] = None,
) -> None:
    """List recorded balancing requests, newest first."""
    connection = sqlite_store.connect(history_file)
    sqlite_store.ensure_schema(connection)
    entries = sqlite_store.list_balances(connection, limit=limit, session=session)
    connection.close()
    for entry in entries:
        result = entry["result"] or {}
        outcome = result.get("equation") or (result.get("steps") or ["?"])[-1]
        label = entry["session"] or "-"
        typer.echo(f"{entry['id']}\t{label}\t{entry['method']}\t{entry['equation']}\t=> {outcome}")
