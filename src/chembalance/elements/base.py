"""Base interface for element reference data."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional


class ElementData(ABC):
    """Abstract lookup of the per-element facts the balancer relies on.

    Implementations are immutable and passed into the core explicitly, so
    tests can substitute a synthetic table.
    """

    @abstractmethod
    def atomic_weight(self, symbol: str) -> float:
        """Standard atomic weight in g/mol; raises UnknownElementError if missing."""
        pass

    @abstractmethod
    def is_metal(self, symbol: str) -> bool:
        pass

    @abstractmethod
    def fixed_oxidation_state(self, symbol: str) -> Optional[int]:
        """Oxidation number of metals that only take one (group 1, group 2, Al, Zn, Ag)."""
        pass

    @abstractmethod
    def anion_name(self, symbol: str) -> Optional[str]:
        """Name of the monatomic anion ("Chloride"), or None when the element forms none."""
        pass

    @abstractmethod
    def typical_anion_state(self, symbol: str) -> int:
        """Usual negative oxidation number of an anion-forming element."""
        pass

    @abstractmethod
    def forms_oxyanions(self, symbol: str) -> bool:
        """Whether the element's oxidation number varies when bonded to oxygen."""
        pass
