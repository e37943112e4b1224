"""
SimPower utilities package.
Internal utilities - not part of public API.
"""

from . import export, formatters, validators, visualization

__all__ = [
    "export",
    "formatters",
    "validators",
    "visualization",
]
