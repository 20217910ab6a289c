"""Gram formula mass (molar mass) of a formula."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from chembalance.elements import ElementData, PeriodicTable
from chembalance.parser import parse_compound


@dataclass(frozen=True)
class MassContribution:
    element: str
    count: int
    atomic_weight: float

    @property
    def mass(self) -> float:
        return self.atomic_weight * self.count


@dataclass(frozen=True)
class FormulaMass:
    formula: str
    contributions: Tuple[MassContribution, ...]

    @property
    def total(self) -> float:
        return sum(item.mass for item in self.contributions)


def formula_mass(text: str, elements: Optional[ElementData] = None) -> FormulaMass:
    """Per-element mass breakdown of ``text`` in g/mol.

    Raises:
        FormulaParseError: If the formula cannot be parsed.
        UnknownElementError: If an element is missing from ``elements``.
    """
    elements = elements or PeriodicTable.default()
    compound = parse_compound(text)
    contributions = tuple(
        MassContribution(element, count, elements.atomic_weight(element))
        for element, count in compound.composition.items()
    )
    return FormulaMass(compound.label, contributions)


def format_formula_mass(result: FormulaMass) -> str:
    lines = [f"Formula: {result.formula}"]
    for item in result.contributions:
        lines.append(f"  {item.element}: {item.mass:.3f} g/mol (x{item.count})")
    lines.append(f"  Total GFM: {result.total:.3f} g/mol")
    return "\n".join(lines)
