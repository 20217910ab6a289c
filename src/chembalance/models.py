"""Data structures for species, equations and balancing results."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple


def format_charge(charge: int) -> str:
    """Render a charge in caret notation ("", "+", "-", "^2+", "^3-")."""
    if charge == 0:
        return ""
    sign = "+" if charge > 0 else "-"
    magnitude = abs(charge)
    return sign if magnitude == 1 else f"^{magnitude}{sign}"


@dataclass(frozen=True)
class Compound:
    """A parsed species.

    Attributes:
        formula: Core formula with the charge annotation and leading coefficient stripped.
        composition: Element symbol to positive atom count, in order of first appearance.
        charge: Net ionic charge, 0 for neutral species.
        coefficient: Leading coefficient supplied in the input text, if any.
    """

    formula: str
    composition: Mapping[str, int]
    charge: int = 0
    coefficient: Optional[int] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "composition", MappingProxyType(dict(self.composition)))

    def __hash__(self) -> int:
        return hash((self.formula, tuple(self.composition.items()), self.charge))

    @property
    def label(self) -> str:
        return f"{self.formula}{format_charge(self.charge)}"

    @property
    def elements(self) -> Tuple[str, ...]:
        return tuple(self.composition)

    def count(self, element: str) -> int:
        return self.composition.get(element, 0)

    def __str__(self) -> str:
        return self.label


@dataclass(frozen=True)
class Equation:
    reactants: Tuple[Compound, ...]
    products: Tuple[Compound, ...]

    @property
    def species(self) -> Tuple[Compound, ...]:
        return self.reactants + self.products

    @property
    def reactant_count(self) -> int:
        return len(self.reactants)

    @property
    def elements(self) -> Tuple[str, ...]:
        seen: Dict[str, None] = {}
        for compound in self.species:
            for element in compound.composition:
                seen.setdefault(element, None)
        return tuple(seen)


@dataclass(frozen=True)
class BalanceResult:
    """Outcome of one balancing request.

    Attributes:
        steps: Human-readable derivation lines, ending in the balanced equation
            unless the request failed.
        method: "redox", "algebraic" or "error".
        equation: Balanced equation text without the "Balanced Equation: " prefix.
        coefficients: Integer coefficients per input species (algebraic path only).
        is_redox: Whether any oxidation number changed across the reaction.
        medium: "acidic" or "basic" when the half-reaction method produced the result.
    """

    steps: Tuple[str, ...]
    method: str
    equation: Optional[str] = None
    coefficients: Optional[Tuple[int, ...]] = None
    is_redox: bool = False
    medium: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.method != "error"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "steps": list(self.steps),
            "method": self.method,
            "equation": self.equation,
            "coefficients": list(self.coefficients) if self.coefficients is not None else None,
            "is_redox": self.is_redox,
            "medium": self.medium,
        }

    def __str__(self) -> str:
        return "\n".join(self.steps)
