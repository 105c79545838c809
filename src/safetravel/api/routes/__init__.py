"""Route group exports."""

from . import crime, health, route

__all__ = ["route", "crime", "health"]
