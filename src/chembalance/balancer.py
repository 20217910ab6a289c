"""Entry point that turns equation text into balancing steps.

``balance_equation`` never raises for bad input: format and parse errors
become a single ``"Error: ..."`` step. Only invariant violations inside the
arithmetic (such as a zero denominator) propagate.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from chembalance.config import load_settings
from chembalance.constants import BALANCED_PREFIX
from chembalance.elements import ElementData, PeriodicTable
from chembalance.errors import EquationFormatError, FormulaParseError, RedoxDecompositionError
from chembalance.models import BalanceResult, Equation
from chembalance.oxidation import classify
from chembalance.parser import parse_equation
from chembalance.redox import balance_redox
from chembalance.solver import balance_algebraic

logger = logging.getLogger(__name__)


def _error(step: str) -> BalanceResult:
    return BalanceResult(steps=(step,), method="error")


def _check_supplied(equation: Equation, coefficients: Sequence[int]) -> Optional[str]:
    supplied = [compound.coefficient for compound in equation.species]
    if any(value is None for value in supplied):
        return None
    proportional = all(s * coefficients[0] == c * supplied[0] for s, c in zip(supplied, coefficients))
    if proportional:
        return "Supplied coefficients match the balanced equation."
    return f"Supplied coefficients {tuple(supplied)} do not balance the equation; expected {tuple(coefficients)}."


def balance_equation(
    text: str,
    elements: Optional[ElementData] = None,
    validate_coefficients: Optional[bool] = None,
) -> BalanceResult:
    """Balance ``text`` such as ``"Fe + O2 -> Fe2O3"``.

    Redox equations (some element oxidized and some reduced) go through the
    half-reaction method; everything else, and any redox equation whose
    decomposition is not clean, is solved algebraically.

    Args:
        text: Equation with one "->" (or "=") and "+"-joined species.
        elements: Reference table; defaults to the built-in periodic table.
        validate_coefficients: Compare caller-supplied leading coefficients with
            the computed ones. Defaults to ``CHEMBALANCE_VALIDATE_COEFFICIENTS``.
    """
    elements = elements or PeriodicTable.default()
    if validate_coefficients is None:
        validate_coefficients = load_settings().validate_coefficients

    try:
        equation = parse_equation(text)
    except EquationFormatError as exc:
        return _error(str(exc))
    except FormulaParseError as exc:
        logger.info("Could not parse %r: %s", text, exc)
        return _error(f"Error: Failed to parse the equation components ({exc}).")

    classification = classify(equation, elements)
    steps: List[str] = []
    if classification.has_both_halves:
        steps.append("Redox reaction detected. Using half-reaction method:")
        try:
            outcome = balance_redox(equation, classification, elements)
        except RedoxDecompositionError as exc:
            logger.info("Half-reaction method failed for %r: %s", text, exc)
            steps.extend(exc.steps)
            steps.append("Half-reaction method did not yield a clean decomposition; falling back to algebraic method.")
        else:
            steps.extend(outcome.steps)
            return BalanceResult(
                steps=tuple(steps),
                method="redox",
                equation=outcome.equation,
                is_redox=True,
                medium=outcome.medium,
            )

    try:
        algebraic_steps, coefficients = balance_algebraic(equation)
    except ValueError as exc:
        steps.append(f"Error: Equation cannot be balanced ({exc}).")
        return BalanceResult(steps=tuple(steps), method="error", is_redox=classification.is_redox)
    final = algebraic_steps[-1]
    steps.extend(algebraic_steps[:-1])
    if validate_coefficients:
        note = _check_supplied(equation, coefficients)
        if note is not None:
            steps.append(note)
    steps.append(final)
    return BalanceResult(
        steps=tuple(steps),
        method="algebraic",
        equation=final[len(BALANCED_PREFIX):],
        coefficients=coefficients,
        is_redox=classification.is_redox,
    )
