"""callsnip package root."""

from callsnip.exceptions import NeverRaise, NeverThrown
from callsnip.invariants import never

__all__ = ["__version__", "NeverRaise", "NeverThrown", "never"]

__version__ = "0.1.0"
