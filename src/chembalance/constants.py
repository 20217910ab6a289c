"""Shared tokens and auxiliary species labels."""

from __future__ import annotations

# Reaction separators. "<->" is folded into "->" before splitting.
ARROW = "->"
REVERSIBLE_ARROW = "<->"
EQUALS_ARROW = "="

ELECTRON = "e-"
WATER = "H2O"
PROTON = "H+"
HYDROXIDE = "OH-"

# Order in which auxiliary species are cancelled across the two sides.
CANCELLATION_ORDER = (ELECTRON, WATER, PROTON, HYDROXIDE)

ACIDIC = "acidic"
BASIC = "basic"

BALANCED_PREFIX = "Balanced Equation: "
