"""Half-reaction balancing for oxidation-reduction equations.

A redox equation is split into an oxidation and a reduction half-reaction.
Each half passes through the same pipeline of pure stages::

    identify_key -> balance_oxygen -> balance_hydrogen -> balance_charge

Every stage takes a :class:`HalfReaction` and returns a new one (plus an
optional derivation step), so each stage can be exercised on its own. The
two balanced halves are scaled to the same electron count, summed, and the
auxiliary species cancelled across the arrow.

Any decomposition that does not end in a conserved equation containing
every input species raises
:class:`~chembalance.errors.RedoxDecompositionError`; the caller falls back
to the algebraic solver.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from chembalance.constants import (
    ACIDIC,
    BALANCED_PREFIX,
    BASIC,
    CANCELLATION_ORDER,
    ELECTRON,
)
from chembalance.elements import ElementData, PeriodicTable
from chembalance.errors import RedoxDecompositionError
from chembalance.models import Compound, Equation
from chembalance.oxidation import RedoxClassification, assign_oxidation_numbers
from chembalance.parser import parse_compound
from chembalance.solver import Term, format_terms, is_balanced

logger = logging.getLogger(__name__)

WATER = parse_compound("H2O")
PROTON = parse_compound("H+")
HYDROXIDE = parse_compound("OH-")


@dataclass(frozen=True)
class HalfReaction:
    """One electron-transfer sub-reaction.

    Attributes:
        reactant: Species being oxidized or reduced.
        product: What it turns into.
        reactant_count: Multiplier on the reactant after the key element is balanced.
        product_count: Multiplier on the product after the key element is balanced.
        left_extras: Auxiliary species added to the reactant side, in insertion order.
        right_extras: Auxiliary species added to the product side, in insertion order.
        electron_count: Electrons transferred.
        electrons_on_left: Whether the electrons are consumed (reduction) or released.
        key_element: Element the half-reaction was matched on.
    """

    reactant: Compound
    product: Compound
    reactant_count: int = 1
    product_count: int = 1
    left_extras: Tuple[Term, ...] = ()
    right_extras: Tuple[Term, ...] = ()
    electron_count: int = 0
    electrons_on_left: bool = False
    key_element: Optional[str] = None

    @property
    def left_terms(self) -> Tuple[Term, ...]:
        return ((self.reactant, self.reactant_count),) + self.left_extras

    @property
    def right_terms(self) -> Tuple[Term, ...]:
        return ((self.product, self.product_count),) + self.right_extras

    def atoms(self, element: str, left: bool) -> int:
        terms = self.left_terms if left else self.right_terms
        return sum(compound.count(element) * count for compound, count in terms)

    def charge(self, left: bool) -> int:
        terms = self.left_terms if left else self.right_terms
        return sum(compound.charge * count for compound, count in terms)

    def add_extra(self, compound: Compound, count: int, left: bool) -> HalfReaction:
        if left:
            return replace(self, left_extras=self.left_extras + ((compound, count),))
        return replace(self, right_extras=self.right_extras + ((compound, count),))

    def __str__(self) -> str:
        left = format_terms(self.left_terms)
        right = format_terms(self.right_terms)
        if self.electron_count > 0:
            electrons = f" + {self.electron_count}{ELECTRON}"
            if self.electrons_on_left:
                left += electrons
            else:
                right += electrons
        return f"{left} -> {right}"


StageResult = Tuple[HalfReaction, Optional[str]]
Stage = Callable[[HalfReaction, str], StageResult]


def identify_key(half: HalfReaction, medium: str) -> StageResult:
    """Pick the first element shared by reactant and product and balance its atoms."""
    key = next((e for e in half.reactant.composition if e in half.product.composition), None)
    if key is None:
        key = next(iter(half.reactant.composition))
    half = replace(half, key_element=key)
    left, right = half.reactant.count(key), half.product.count(key)
    if left == right or left == 0 or right == 0:
        return half, None
    multiple = math.lcm(left, right)
    half = replace(half, reactant_count=multiple // left, product_count=multiple // right)
    return half, f"Balance {key}: {half}"


def balance_oxygen(half: HalfReaction, medium: str) -> StageResult:
    left, right = half.atoms("O", True), half.atoms("O", False)
    if left == right:
        return half, None
    half = half.add_extra(WATER, abs(right - left), left < right)
    return half, f"Balance O with H2O: {half}"


def balance_hydrogen(half: HalfReaction, medium: str) -> StageResult:
    left, right = half.atoms("H", True), half.atoms("H", False)
    if left == right:
        return half, None
    deficit = abs(right - left)
    deficient_left = left < right
    if medium == ACIDIC:
        half = half.add_extra(PROTON, deficit, deficient_left)
        return half, f"Balance H with H+: {half}"
    half = half.add_extra(WATER, deficit, deficient_left)
    half = half.add_extra(HYDROXIDE, deficit, not deficient_left)
    return half, f"Balance H in basic solution (H2O/OH-): {half}"


def balance_charge(half: HalfReaction, medium: str) -> StageResult:
    """Add electrons to the more positive side."""
    left, right = half.charge(True), half.charge(False)
    if left == right:
        return half, None
    half = replace(half, electron_count=abs(left - right), electrons_on_left=left > right)
    return half, f"Balance charge with e-: {half}"


PIPELINE: Tuple[Stage, ...] = (identify_key, balance_oxygen, balance_hydrogen, balance_charge)


def balance_half(half: HalfReaction, medium: str) -> Tuple[HalfReaction, List[str]]:
    steps = [f"Half-reaction: {half.reactant.label} -> {half.product.label}"]
    for stage in PIPELINE:
        half, step = stage(half, medium)
        if step is not None:
            steps.append(step)
    return half, steps


def has_hydroxide(compound: Compound, elements: ElementData) -> bool:
    """Whether a species carries a hydroxide group (OH-, Ca(OH)2, NaOH)."""
    if dict(compound.composition) == {"O": 1, "H": 1} and compound.charge == -1:
        return True
    if "(OH)" in compound.formula:
        return True
    others = [e for e in compound.composition if e not in ("O", "H")]
    return compound.formula.endswith("OH") and any(elements.is_metal(e) for e in others)


def detect_medium(equation: Equation, elements: Optional[ElementData] = None) -> str:
    """Basic if a reactant, or failing that a product, carries hydroxide; otherwise acidic."""
    elements = elements or PeriodicTable.default()
    for side in (equation.reactants, equation.products):
        if any(has_hydroxide(compound, elements) for compound in side):
            return BASIC
    return ACIDIC


def _first_with(compounds: Sequence[Compound], element: str) -> Optional[Compound]:
    return next((compound for compound in compounds if element in compound.composition), None)


def _first_changed(
    compounds: Sequence[Compound],
    element: str,
    start: int,
    direction: int,
    elements: ElementData,
) -> Optional[Compound]:
    """First compound where ``element`` moved in ``direction``, else the first containing it."""
    for compound in compounds:
        value = assign_oxidation_numbers(compound, elements).get(element)
        if value is not None and (value - start) * direction > 0:
            return compound
    return _first_with(compounds, element)


def decompose(
    equation: Equation,
    classification: RedoxClassification,
    elements: Optional[ElementData] = None,
) -> List[HalfReaction]:
    """Split a redox equation into half-reactions, oxidation halves first."""
    elements = elements or PeriodicTable.default()
    halves: List[HalfReaction] = []
    if classification.is_disproportionation:
        element = classification.oxidized[0]
        reactant = _first_with(equation.reactants, element)
        candidates = [compound for compound in equation.products if element in compound.composition]
        if reactant is None or len(candidates) < 2:
            return halves
        start = assign_oxidation_numbers(reactant, elements)[element]
        first, second = candidates[0], candidates[1]
        first_value = assign_oxidation_numbers(first, elements)[element]
        second_value = assign_oxidation_numbers(second, elements)[element]
        if second_value > start > first_value:
            first, second = second, first
        halves.append(HalfReaction(reactant, first))
        halves.append(HalfReaction(reactant, second))
        return halves

    for changed, direction in ((classification.oxidized, 1), (classification.reduced, -1)):
        for element in changed:
            reactant = _first_with(equation.reactants, element)
            start = classification.before[element]
            product = _first_changed(equation.products, element, start, direction, elements)
            if reactant is not None and product is not None:
                halves.append(HalfReaction(reactant, product))
    return halves


def _accumulate(totals: Dict[str, int], registry: Dict[str, Compound], terms: Sequence[Term], factor: int) -> None:
    for compound, count in terms:
        registry.setdefault(compound.label, compound)
        totals[compound.label] = totals.get(compound.label, 0) + count * factor


def _cancel(left: Dict[str, int], right: Dict[str, int], label: str) -> None:
    amount = min(left.get(label, 0), right.get(label, 0))
    if amount > 0:
        left[label] -= amount
        right[label] -= amount


def combine(
    oxidation: HalfReaction,
    reduction: HalfReaction,
    equation: Optional[Equation] = None,
) -> Tuple[List[str], str]:
    """Scale both halves to a common electron count, add them and cancel auxiliaries.

    When ``equation`` is given, every one of its reactants must survive on the
    left and every product on the right.
    """
    steps: List[str] = []
    e1, e2 = oxidation.electron_count, reduction.electron_count
    if e1 == 0 or e2 == 0:
        raise RedoxDecompositionError("a half-reaction transfers no electrons")
    if oxidation.electrons_on_left == reduction.electrons_on_left:
        raise RedoxDecompositionError("both half-reactions put electrons on the same side")
    multiple = math.lcm(e1, e2)
    factors = (multiple // e1, multiple // e2)
    if e1 != e2:
        steps.append(
            f"Multiply half-reactions to equalize electrons: oxidation x{factors[0]}, reduction x{factors[1]}"
        )

    left: Dict[str, int] = {}
    right: Dict[str, int] = {}
    registry: Dict[str, Compound] = {}
    for half, factor in zip((oxidation, reduction), factors):
        _accumulate(left, registry, half.left_terms, factor)
        _accumulate(right, registry, half.right_terms, factor)
        electrons = left if half.electrons_on_left else right
        electrons[ELECTRON] = electrons.get(ELECTRON, 0) + half.electron_count * factor

    for label in CANCELLATION_ORDER:
        _cancel(left, right, label)

    if left.get(ELECTRON, 0) or right.get(ELECTRON, 0):
        raise RedoxDecompositionError("electrons do not cancel")
    left = {label: count for label, count in left.items() if count and label != ELECTRON}
    right = {label: count for label, count in right.items() if count and label != ELECTRON}
    if not left or not right:
        raise RedoxDecompositionError("a side vanished after cancellation")
    if equation is not None:
        missing = [c.label for c in equation.reactants if c.label not in left]
        missing += [c.label for c in equation.products if c.label not in right]
        if missing:
            raise RedoxDecompositionError(f"half-reactions leave out {', '.join(missing)}")

    divisor = math.gcd(*left.values(), *right.values())
    left_terms = [(registry[label], count // divisor) for label, count in left.items()]
    right_terms = [(registry[label], count // divisor) for label, count in right.items()]
    if not is_balanced(left_terms, right_terms):
        raise RedoxDecompositionError("recombined equation does not conserve atoms and charge")

    final = f"{format_terms(left_terms)} -> {format_terms(right_terms)}"
    steps.append(BALANCED_PREFIX + final)
    return steps, final


@dataclass(frozen=True)
class RedoxOutcome:
    steps: Tuple[str, ...]
    equation: str
    medium: str
    halves: Tuple[HalfReaction, ...]


def balance_redox(
    equation: Equation,
    classification: RedoxClassification,
    elements: Optional[ElementData] = None,
) -> RedoxOutcome:
    """Balance ``equation`` by the half-reaction method.

    Raises:
        RedoxDecompositionError: If there are not exactly two half-reactions or
            their combination does not balance or leaves out an input species.
            ``steps`` on the error holds the derivation produced so far.
    """
    elements = elements or PeriodicTable.default()
    halves = decompose(equation, classification, elements)
    if len(halves) != 2:
        raise RedoxDecompositionError(f"expected two half-reactions, found {len(halves)}")

    medium = detect_medium(equation, elements)
    steps: List[str] = []
    if medium == BASIC:
        steps.append("Basic medium detected (hydroxide present).")
    balanced: List[HalfReaction] = []
    for half in halves:
        half, half_steps = balance_half(half, medium)
        balanced.append(half)
        steps.extend(half_steps)

    try:
        combine_steps, final = combine(balanced[0], balanced[1], equation)
    except RedoxDecompositionError as exc:
        exc.steps = tuple(steps)
        raise
    steps.extend(combine_steps)
    logger.debug("Redox balance (%s): %s", medium, final)
    return RedoxOutcome(tuple(steps), final, medium, tuple(balanced))
