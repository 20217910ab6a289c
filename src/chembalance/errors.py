"""Exception hierarchy for chembalance."""

from __future__ import annotations

from typing import Tuple


class ChemBalanceError(Exception):
    """Base class for all errors raised by chembalance."""


class FormulaParseError(ChemBalanceError, ValueError):
    """A species formula does not follow the supported grammar."""

    def __init__(self, formula: str, reason: str) -> None:
        super().__init__(f"{reason}: {formula!r}")
        self.formula = formula
        self.reason = reason


class UnmatchedParenthesisError(FormulaParseError):
    def __init__(self, formula: str) -> None:
        super().__init__(formula, "Unmatched parentheses in formula")


class EmptyFormulaError(FormulaParseError):
    def __init__(self, formula: str) -> None:
        super().__init__(formula, "No element symbols in formula")


class UnsupportedDigitError(FormulaParseError):
    """Subscript, superscript or other non-ASCII digits in a formula."""

    def __init__(self, formula: str, character: str) -> None:
        super().__init__(formula, f"Unsupported digit character {character!r} in formula")
        self.character = character


class EquationFormatError(ChemBalanceError, ValueError):
    """The equation text cannot be split into two non-empty sides."""


class UnknownElementError(ChemBalanceError, KeyError):
    """An element symbol is missing from the reference table."""

    def __init__(self, symbol: str) -> None:
        super().__init__(symbol)
        self.symbol = symbol

    def __str__(self) -> str:
        return f"Unknown element: {self.symbol}"


class RedoxDecompositionError(ChemBalanceError):
    """The half-reaction method could not produce a clean decomposition.

    ``steps`` holds the derivation produced before the failure.
    """

    def __init__(self, message: str, steps: Tuple[str, ...] = ()) -> None:
        super().__init__(message)
        self.steps = steps
