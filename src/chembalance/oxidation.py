"""Heuristic oxidation-number assignment.

Each element of a compound walks an ordered ladder of ``(predicate, rule)``
pairs; the first matching rule yields either a :class:`Known` value or
:class:`Unknown`. Unknowns are then resolved against the net charge:

* exactly one unknown takes whatever value makes the weighted sum equal
  the charge;
* several unknowns all become 0. This is an approximation, not a
  derivation, and misclassifies many organic or complex species.

A final peroxide correction re-reads oxygen as -1 when a compound has
exactly two oxygens and -2 fails to add up.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from chembalance.elements import ElementData, PeriodicTable
from chembalance.models import Compound, Equation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Known:
    value: int


@dataclass(frozen=True)
class Unknown:
    pass


@dataclass(frozen=True)
class Resolved:
    value: int


OxidationState = Union[Known, Unknown, Resolved]
UNKNOWN = Unknown()


@dataclass(frozen=True)
class _Context:
    compound: Compound
    elements: ElementData

    def has_other_metal(self, element: str) -> bool:
        return any(other != element and self.elements.is_metal(other) for other in self.compound.composition)


Predicate = Callable[[_Context, str], bool]
Rule = Callable[[_Context, str], OxidationState]


def _anion_rule(context: _Context, element: str) -> OxidationState:
    if "O" in context.compound.composition and context.elements.forms_oxyanions(element):
        return UNKNOWN
    return Known(context.elements.typical_anion_state(element))


RULES: Tuple[Tuple[Predicate, Rule], ...] = (
    (lambda ctx, el: el == "H", lambda ctx, el: Known(-1 if ctx.has_other_metal(el) else 1)),
    (lambda ctx, el: el == "O", lambda ctx, el: Known(-2)),
    (lambda ctx, el: el == "F", lambda ctx, el: Known(-1)),
    (
        lambda ctx, el: ctx.elements.fixed_oxidation_state(el) is not None,
        lambda ctx, el: Known(ctx.elements.fixed_oxidation_state(el)),
    ),
    (lambda ctx, el: ctx.elements.anion_name(el) is not None, _anion_rule),
    (lambda ctx, el: True, lambda ctx, el: UNKNOWN),
)


def _divide(numerator: int, denominator: int) -> int:
    # Truncates toward zero.
    quotient = abs(numerator) // abs(denominator)
    return quotient if (numerator >= 0) == (denominator > 0) else -quotient


def _value(state: OxidationState) -> int:
    return 0 if isinstance(state, Unknown) else state.value


def assign_oxidation_states(
    compound: Compound, elements: Optional[ElementData] = None
) -> Dict[str, OxidationState]:
    """Assign an oxidation state to every element of ``compound``.

    The returned mapping never contains :class:`Unknown`: values from the
    rule ladder are :class:`Known`, values derived from the net charge are
    :class:`Resolved`.
    """
    elements = elements or PeriodicTable.default()
    composition = compound.composition
    charge = compound.charge
    if not composition:
        return {}
    if len(composition) == 1:
        (element, count), = composition.items()
        if charge == 0:
            return {element: Known(0)}
        return {element: Resolved(_divide(charge, count))}

    context = _Context(compound, elements)
    states: Dict[str, OxidationState] = {}
    for element in composition:
        for predicate, rule in RULES:
            if predicate(context, element):
                states[element] = rule(context, element)
                break

    unknowns = [element for element, state in states.items() if isinstance(state, Unknown)]
    known_sum = sum(_value(state) * composition[element] for element, state in states.items())
    if len(unknowns) == 1:
        element = unknowns[0]
        states[element] = Resolved(_divide(charge - known_sum, composition[element]))
    elif unknowns:
        logger.debug("%s: %d unknown oxidation states, assigning 0 to %s", compound.label, len(unknowns), unknowns)
        for element in unknowns:
            states[element] = Resolved(0)

    oxygen = composition.get("O", 0)
    if oxygen == 2 and _value(states["O"]) == -2:
        total = sum(_value(state) * composition[element] for element, state in states.items())
        if total != charge:
            logger.debug("%s: treating oxygen as peroxide", compound.label)
            states["O"] = Resolved(-1)
            if len(unknowns) == 1:
                element = unknowns[0]
                states[element] = Resolved(_divide(charge - (known_sum + oxygen), composition[element]))
    return states


def assign_oxidation_numbers(compound: Compound, elements: Optional[ElementData] = None) -> Dict[str, int]:
    """Oxidation number per element of ``compound``."""
    return {element: _value(state) for element, state in assign_oxidation_states(compound, elements).items()}


def side_oxidation_numbers(compounds: Sequence[Compound], elements: Optional[ElementData] = None) -> Dict[str, int]:
    """Merge per-compound oxidation numbers; later compounds overwrite earlier ones."""
    merged: Dict[str, int] = {}
    for compound in compounds:
        merged.update(assign_oxidation_numbers(compound, elements))
    return merged


@dataclass(frozen=True)
class RedoxClassification:
    before: Mapping[str, int]
    after: Mapping[str, int]
    oxidized: Tuple[str, ...]
    reduced: Tuple[str, ...]

    @property
    def is_redox(self) -> bool:
        return bool(self.oxidized or self.reduced)

    @property
    def has_both_halves(self) -> bool:
        return bool(self.oxidized and self.reduced)

    @property
    def is_disproportionation(self) -> bool:
        return len(self.oxidized) == 1 and self.oxidized == self.reduced


def classify(equation: Equation, elements: Optional[ElementData] = None) -> RedoxClassification:
    """Compare oxidation numbers across the arrow.

    Each product-side occurrence of an element is compared with the
    element's reactant-side number, so one element can be both oxidized and
    reduced (disproportionation). Elements missing from the products are
    ignored.
    """
    before = side_oxidation_numbers(equation.reactants, elements)
    occurrences: Dict[str, List[int]] = {}
    for compound in equation.products:
        for element, value in assign_oxidation_numbers(compound, elements).items():
            occurrences.setdefault(element, []).append(value)
    after = {element: values[-1] for element, values in occurrences.items()}
    oxidized: List[str] = []
    reduced: List[str] = []
    for element, start in before.items():
        values = occurrences.get(element, [])
        if any(value > start for value in values):
            oxidized.append(element)
        if any(value < start for value in values):
            reduced.append(element)
    logger.debug("Oxidation numbers %s -> %s", before, after)
    return RedoxClassification(before, after, tuple(oxidized), tuple(reduced))
