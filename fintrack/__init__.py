"""Mini README: Package initialiser for the fintrack personal finance tracker.

The package is split into ``finance`` (ledger entities, conversion and
aggregation, the ``FinanceStore``), ``storage`` (pluggable key-value
persistence backends), and ``interface`` (the HTTP adapter). Only light
helpers are re-exported here so importing the package stays cheap.
"""

from .logging_utils import get_logger

__version__ = "0.1.0"

__all__ = ["__version__", "get_logger"]
