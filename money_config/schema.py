"""
Currency data schema.

Entries are parsed from YAML by the loader and handed to
CurrencyCatalog.register() by the bootstrap. Field-level validation
(code format, ranges) stays with the catalog; the schema only fixes the
shape of the data.

A data entry is the catalog's own registration record, so an entry can be
passed straight to ``register(*entry)`` or ``register_many()``.
"""

from __future__ import annotations

from money_kernel.domain.catalog import CatalogEntry

# decimal_places is -1 for pseudo-currencies
CurrencyEntry = CatalogEntry

__all__ = ["CurrencyEntry"]
