"""chembalance core package."""

from chembalance.balancer import balance_equation
from chembalance.elements import ElementData, PeriodicTable
from chembalance.fraction import Fraction
from chembalance.models import BalanceResult, Compound, Equation
from chembalance.oxidation import assign_oxidation_numbers, classify
from chembalance.parser import parse_composition, parse_compound, parse_equation
from chembalance.redox import HalfReaction, balance_redox
from chembalance.solver import solve

__all__ = [
    "BalanceResult",
    "Compound",
    "ElementData",
    "Equation",
    "Fraction",
    "HalfReaction",
    "PeriodicTable",
    "assign_oxidation_numbers",
    "balance_equation",
    "balance_redox",
    "classify",
    "parse_composition",
    "parse_compound",
    "parse_equation",
    "solve",
]
