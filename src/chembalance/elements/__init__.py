from .base import ElementData
from .periodic import PeriodicTable

__all__ = ["ElementData", "PeriodicTable"]
