"""Algebraic balancing over exact fractions.

Each distinct element gives one conservation equation (and, for ionic
equations, total charge gives one more)::

    sum(nu_j * count_ij for reactants j) - sum(nu_k * count_ik for products k) = 0

The first coefficient is fixed to 1 and moved to the constant column, the
remaining unknowns are solved by Gauss-Jordan elimination on
:class:`~chembalance.fraction.Fraction` entries, and the solution is scaled
to the smallest positive integers.

Note: a system with more than one degree of freedom still yields a valid
solution (free unknowns are taken as zero), but it need not be the
chemically meaningful one.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable, List, Sequence, Tuple

import numpy as np

from chembalance.constants import BALANCED_PREFIX
from chembalance.fraction import ONE, ZERO, Fraction
from chembalance.models import Compound, Equation

logger = logging.getLogger(__name__)

Term = Tuple[Compound, int]

CHARGE_ROW = "charge"


def build_conservation_matrix(equation: Equation) -> Tuple[Tuple[str, ...], np.ndarray]:
    """Return the row labels and the (rows x species) integer matrix.

    One row per element, plus a "charge" row when any species is an ion.
    Reactant entries enter positively, product entries negatively.
    """
    rows = equation.elements
    if any(compound.charge for compound in equation.species):
        rows = rows + (CHARGE_ROW,)
    matrix = np.zeros((len(rows), len(equation.species)), dtype=object)
    for j, compound in enumerate(equation.species):
        sign = 1 if j < equation.reactant_count else -1
        for i, row in enumerate(rows):
            value = compound.charge if row == CHARGE_ROW else compound.count(row)
            matrix[i, j] = sign * value
    return rows, matrix


def _eliminate(matrix: np.ndarray, constants: np.ndarray) -> List[int]:
    """Reduce ``matrix | constants`` in place; return the pivot column of each row (-1 if none)."""
    rows, unknowns = matrix.shape
    pivot_columns = [-1] * rows
    row = 0
    for col in range(unknowns):
        if row >= rows:
            break
        pivot = row
        while pivot < rows and matrix[pivot, col].is_zero:
            pivot += 1
        if pivot == rows:
            continue
        if pivot != row:
            matrix[[row, pivot]] = matrix[[pivot, row]]
            constants[[row, pivot]] = constants[[pivot, row]]
        pivot_columns[row] = col
        pivot_value = matrix[row, col]
        logger.debug("Pivot for unknown %d at row %d: %s", col, row, pivot_value)
        matrix[row] = matrix[row] / pivot_value
        constants[row] = constants[row] / pivot_value
        for other in range(rows):
            if other != row and not matrix[other, col].is_zero:
                factor = matrix[other, col]
                matrix[other] = matrix[other] - factor * matrix[row]
                constants[other] = constants[other] - factor * constants[row]
        row += 1
    return pivot_columns


def _back_substitute(matrix: np.ndarray, constants: np.ndarray, pivot_columns: Sequence[int]) -> List[Fraction]:
    unknowns = matrix.shape[1]
    solution = [ZERO] * unknowns
    for i in range(len(pivot_columns) - 1, -1, -1):
        pc = pivot_columns[i]
        if pc == -1:
            continue
        total = ZERO
        for j in range(pc + 1, unknowns):
            total = total + matrix[i, j] * solution[j]
        solution[pc] = constants[i] - total
    return solution


def integer_coefficients(values: Iterable[Fraction]) -> Tuple[int, ...]:
    """Scale fractions by the LCM of their denominators, then divide out the common GCD."""
    values = list(values)
    scale = math.lcm(*(value.denominator for value in values))
    integers = [value.numerator * (scale // value.denominator) for value in values]
    divisor = math.gcd(*integers)
    if divisor > 1:
        integers = [value // divisor for value in integers]
    return tuple(integers)


def solve(reactants: Sequence[Compound], products: Sequence[Compound]) -> Tuple[int, ...]:
    """Compute minimal positive integer coefficients, reactants first.

    Raises:
        ValueError: If the system has no solution in positive integers.
    """
    equation = Equation(tuple(reactants), tuple(products))
    rows, counts = build_conservation_matrix(equation)
    species_count = counts.shape[1]
    if species_count < 2:
        raise ValueError("at least two species are required")

    matrix = np.empty((len(rows), species_count - 1), dtype=object)
    constants = np.empty(len(rows), dtype=object)
    for i in range(len(rows)):
        constants[i] = Fraction(-counts[i, 0])
        for j in range(1, species_count):
            matrix[i, j - 1] = Fraction(counts[i, j])

    pivot_columns = _eliminate(matrix, constants)
    solution = _back_substitute(matrix, constants, pivot_columns)
    coefficients = integer_coefficients([ONE, *solution])
    logger.debug("Rows %s -> coefficients %s", rows, coefficients)

    if any(value <= 0 for value in coefficients):
        raise ValueError(f"no positive solution (computed coefficients {list(coefficients)})")
    residual = counts.dot(np.array(coefficients, dtype=object))
    if any(value != 0 for value in residual):
        raise ValueError("atoms and charge are not conserved by any choice of coefficients")
    return coefficients


def format_terms(terms: Iterable[Term]) -> str:
    """Join ``(compound, count)`` pairs as ``"2 H2 + O2"``, omitting a count of 1."""
    return " + ".join(compound.label if count == 1 else f"{count} {compound.label}" for compound, count in terms)


def format_equation(equation: Equation, coefficients: Sequence[int]) -> str:
    split = equation.reactant_count
    left = format_terms(zip(equation.reactants, coefficients[:split]))
    right = format_terms(zip(equation.products, coefficients[split:]))
    return f"{left} -> {right}"


def is_balanced(left: Iterable[Term], right: Iterable[Term]) -> bool:
    """Check that two sides carry the same atoms and the same total charge."""
    totals: dict = {}
    charge = 0
    for terms, sign in ((left, 1), (right, -1)):
        for compound, count in terms:
            charge += sign * count * compound.charge
            for element, atoms in compound.composition.items():
                totals[element] = totals.get(element, 0) + sign * count * atoms
    return charge == 0 and all(value == 0 for value in totals.values())


def balance_algebraic(equation: Equation) -> Tuple[List[str], Tuple[int, ...]]:
    """Solve the conservation system and describe it as derivation steps."""
    steps = ["Using algebraic method for balancing:"]
    coefficients = solve(equation.reactants, equation.products)
    steps.append(BALANCED_PREFIX + format_equation(equation, coefficients))
    return steps, coefficients
