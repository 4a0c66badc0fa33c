"""
money_config -- currency data bootstrap for CurrencyCatalog.

Responsibility:
    Fills a ``CurrencyCatalog`` from YAML currency data: a mandatory
    primary source and an optional extension source whose entries override
    (same code) or extend the primary.  ``get_default_catalog()`` is the
    single entrypoint for applications that want one shared catalog.

Architecture position:
    Configuration -- sits above ``money_kernel``.  The kernel MUST NEVER
    import from ``money_config``; callers that build their own catalogs
    need nothing from this package.

Invariants enforced:
    - Each entry is registered through ``CurrencyCatalog.register()``, so
      every catalog invariant holds for bootstrapped data.
    - The shared default catalog is bootstrapped at most once per process
      (until ``reset_default_catalog()``).

Failure modes:
    - ``CatalogBootstrapError`` -- the primary source is missing or is not
      valid YAML, or the extension source is present but not valid YAML.
    - ``CurrencyAlreadyRegisteredError`` -- the data declares a code,
      numeric code or country twice, or one the target catalog already
      holds.  Propagates before anything is registered.
    - Entries the catalog rejects as malformed are skipped with a
      ``catalog_entry_skipped`` warning.
"""

from __future__ import annotations

import threading
from pathlib import Path

import yaml

from money_config.loader import iter_currency_entries, merge_entries
from money_config.schema import CurrencyEntry
from money_kernel.domain.catalog import CurrencyCatalog
from money_kernel.exceptions import CatalogBootstrapError, MoneyValidationError
from money_kernel.logging_config import LogContext, get_logger

__all__ = [
    "CurrencyEntry",
    "DEFAULT_PRIMARY_SOURCE",
    "DEFAULT_EXTENSION_SOURCE",
    "bootstrap_catalog",
    "load_catalog",
    "get_default_catalog",
    "reset_default_catalog",
]

_logger = get_logger("config")

_DATA_DIR = Path(__file__).parent / "data"
DEFAULT_PRIMARY_SOURCE = _DATA_DIR / "currencies.yaml"
DEFAULT_EXTENSION_SOURCE = _DATA_DIR / "currencies_extension.yaml"

_default_catalog: CurrencyCatalog | None = None
_default_lock = threading.Lock()


def _read_entries(path: Path) -> list[CurrencyEntry]:
    try:
        return list(iter_currency_entries(path))
    except (OSError, yaml.YAMLError, ValueError) as exc:
        raise CatalogBootstrapError(str(path), f"{type(exc).__name__}: {exc}") from exc


def bootstrap_catalog(
    catalog: CurrencyCatalog,
    primary: Path | str | None = None,
    extension: Path | str | None = None,
) -> int:
    """Register the currencies from the data sources into catalog.

    Contract:
        The primary source must exist.  The extension source is optional;
        when it is absent the primary data is used as is.

    Postconditions:
        - Every well-formed, catalog-valid entry is registered.
        - Returns the number of currencies registered by this call.
        - On any exception catalog is left as it was.  A concurrent
          register() on catalog during the bootstrap can still win a key,
          in which case the entries before it stay registered.

    Raises:
        CatalogBootstrapError: primary source missing or unreadable.
        CurrencyAlreadyRegisteredError: conflicting entries in the data or
            with currencies already in catalog.
    """
    primary_path = Path(primary) if primary is not None else DEFAULT_PRIMARY_SOURCE
    extension_path = Path(extension) if extension is not None else DEFAULT_EXTENSION_SOURCE

    with LogContext.bind(catalog=catalog.name, source=str(primary_path)):
        if not primary_path.is_file():
            raise CatalogBootstrapError(str(primary_path), "primary currency data not found")
        primary_entries = _read_entries(primary_path)

        if extension_path.is_file():
            extension_entries = _read_entries(extension_path)
        else:
            _logger.debug(
                "catalog_extension_missing",
                extra={"path": str(extension_path)},
            )
            extension_entries = []

        # Entries are vetted in a scratch catalog first, so the target is
        # only written once every entry is known to fit.
        staging = CurrencyCatalog(catalog.name)
        accepted: list[CurrencyEntry] = []
        skipped = 0
        for entry in merge_entries(primary_entries, extension_entries):
            try:
                staging.register(*entry)
            except MoneyValidationError as exc:
                skipped += 1
                _logger.warning(
                    "catalog_entry_skipped",
                    extra={
                        "currency_code": entry.code,
                        "error_code": exc.code,
                        "reason": str(exc),
                    },
                )
                continue
            accepted.append(entry)

        for entry in accepted:
            catalog.check_available(entry.code, entry.numeric_code, entry.country_codes)
        registered = len(catalog.register_many(accepted))

        _logger.info(
            "catalog_bootstrap_completed",
            extra={
                "extension": str(extension_path) if extension_entries else None,
                "registered": registered,
                "skipped": skipped,
                "total": len(catalog),
            },
        )
    return registered


def load_catalog(
    primary: Path | str | None = None,
    extension: Path | str | None = None,
    name: str = "default",
) -> CurrencyCatalog:
    """Build a new catalog and bootstrap it from the data sources."""
    catalog = CurrencyCatalog(name)
    bootstrap_catalog(catalog, primary, extension)
    return catalog


def get_default_catalog() -> CurrencyCatalog:
    """The ONLY shared catalog entrypoint.

    Bootstraps from the packaged data on first use; later calls, from any
    thread, return the same catalog.
    """
    global _default_catalog
    catalog = _default_catalog
    if catalog is not None:
        return catalog
    with _default_lock:
        if _default_catalog is None:
            _default_catalog = load_catalog()
        return _default_catalog


def reset_default_catalog() -> None:
    """Drop the shared catalog. FOR TESTING ONLY."""
    global _default_catalog
    with _default_lock:
        _default_catalog = None
