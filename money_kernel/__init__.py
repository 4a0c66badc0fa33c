"""
Money Kernel

Exact monetary values for financial code:
- Currencies held in an explicit, thread-safe catalog
- BigMoney and Money with currency-checked decimal arithmetic
- Explicit rounding modes at every scale-reducing operation
- Exchange rates with inversion, conversion and cross rates
- A compact binary codec validated against the receiving catalog
"""

__version__ = "0.1.0"
