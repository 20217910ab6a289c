"""Formula and equation parsing.

Grammar of a species::

    [coefficient[ ]] core [charge]

    core    := (element [count] | "(" core ")" [count] | other)*
    element := uppercase letter followed by lowercase letters
    charge  := "^" [digits] sign | "(" digits sign ")" | sign

Characters that are neither element symbols, digits nor parentheses are
skipped, so stray separators inside a formula are tolerated. Digits must be
ASCII; subscript or superscript digits raise :class:`UnsupportedDigitError`.
"""

from __future__ import annotations

import logging
import re
import string
from typing import Dict, List, MutableMapping, Optional, Tuple

from chembalance.constants import ARROW, EQUALS_ARROW, REVERSIBLE_ARROW
from chembalance.errors import (
    EmptyFormulaError,
    EquationFormatError,
    UnmatchedParenthesisError,
    UnsupportedDigitError,
)
from chembalance.models import Compound, Equation

logger = logging.getLogger(__name__)

_COEFFICIENT = re.compile(r"^([0-9]+) ?")
_CHARGE = re.compile(r"^(.*?)(?:\^([0-9]+)?([+-])|\(([0-9]+)([+-])\)|([+-]))$")
_SIDES = re.compile(f"{re.escape(ARROW)}|{re.escape(EQUALS_ARROW)}")
# A "+" joins two species when it stands between whitespace or directly
# precedes the next species; a "+" closing an ion ("Cu^2+ + Zn") does neither.
_JOIN = re.compile(r"\s+\+\s*|\+(?=\s*[A-Z(])")


def split_coefficient(text: str) -> Tuple[Optional[int], str]:
    """Strip a leading integer coefficient ("2 H2O" or "2H2O")."""
    text = text.strip()
    match = _COEFFICIENT.match(text)
    if match is None:
        return None, text
    return int(match.group(1)), text[match.end():]


def split_charge(text: str) -> Tuple[str, int]:
    """Split a trailing charge annotation from a formula."""
    match = _CHARGE.match(text)
    if match is None:
        return text, 0
    core = match.group(1)
    if match.group(3) is not None:
        number, sign = match.group(2), match.group(3)
    elif match.group(5) is not None:
        number, sign = match.group(4), match.group(5)
    else:
        number, sign = None, match.group(6)
    magnitude = int(number) if number else 1
    return core, magnitude if sign == "+" else -magnitude


def parse_composition(text: str) -> Dict[str, int]:
    """Parse a core formula (no charge) into element counts.

    Raises:
        UnmatchedParenthesisError: If an opening parenthesis is never closed.
        UnsupportedDigitError: If the formula uses non-ASCII digits such as "₂".
    """
    composition: Dict[str, int] = {}
    _parse_group(text, 0, len(text), 1, composition, text)
    return {element: count for element, count in composition.items() if count > 0}


def _read_number(text: str, index: int, end: int) -> Tuple[int, int]:
    start = index
    while index < end and text[index] in string.digits:
        index += 1
    if index == start:
        return 1, index
    return int(text[start:index]), index


def _parse_group(
    text: str,
    start: int,
    end: int,
    multiplier: int,
    composition: MutableMapping[str, int],
    formula: str,
) -> None:
    i = start
    while i < end:
        char = text[i]
        if char == "(":
            depth = 1
            j = i + 1
            while j < end and depth > 0:
                if text[j] == "(":
                    depth += 1
                elif text[j] == ")":
                    depth -= 1
                j += 1
            if depth != 0:
                raise UnmatchedParenthesisError(formula)
            count, after = _read_number(text, j, end)
            _parse_group(text, i + 1, j - 1, multiplier * count, composition, formula)
            i = after
        elif char.isupper():
            j = i + 1
            while j < end and text[j].islower():
                j += 1
            element = text[i:j]
            count, i = _read_number(text, j, end)
            composition[element] = composition.get(element, 0) + count * multiplier
        elif char.isdigit() and char not in string.digits:
            raise UnsupportedDigitError(formula, char)
        else:
            i += 1


def parse_compound(text: str) -> Compound:
    """Parse one species such as ``"Al2(SO4)3"``, ``"2 H2O"`` or ``"SO4^2-"``.

    The leading coefficient is recorded on the compound but never used for
    balancing.
    """
    coefficient, remainder = split_coefficient(text)
    core, charge = split_charge(remainder)
    core = core.strip()
    composition = parse_composition(core)
    if not composition:
        raise EmptyFormulaError(text)
    compound = Compound(formula=core, composition=composition, charge=charge, coefficient=coefficient)
    logger.debug("Parsed %r -> %s %s charge=%d", text, compound.formula, dict(composition), charge)
    return compound


def split_species(side: str) -> List[str]:
    return [token.strip() for token in _JOIN.split(side) if token.strip()]


def split_sides(text: str) -> Tuple[str, str]:
    """Split equation text on its single reaction arrow.

    Raises:
        EquationFormatError: On a missing or repeated separator or an empty side.
    """
    sides = _SIDES.split(text.replace(REVERSIBLE_ARROW, ARROW))
    if len(sides) != 2:
        raise EquationFormatError(
            "Error: Equation must have a single '->' (or '=') separating reactants and products."
        )
    reactants, products = sides[0].strip(), sides[1].strip()
    if not reactants or not products:
        raise EquationFormatError("Error: Reactant or product side is empty.")
    return reactants, products


def parse_equation(text: str) -> Equation:
    """Parse ``"reactant + ... -> product + ..."`` into an :class:`Equation`."""
    left, right = split_sides(text)
    reactants = tuple(parse_compound(token) for token in split_species(left))
    products = tuple(parse_compound(token) for token in split_species(right))
    if not reactants or not products:
        raise EquationFormatError("Error: Reactant or product side is empty.")
    return Equation(reactants=reactants, products=products)
