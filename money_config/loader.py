"""
Currency Data Loader (``money_config.loader``).

Responsibility
--------------
Loads YAML currency data files and parses them into
``money_config.schema.CurrencyEntry`` instances.  Callers normally go
through ``money_config.bootstrap_catalog()`` instead of using this module
directly.

Architecture position
---------------------
**Config layer** -- infrastructure tooling.  Depends on the kernel only
for logging; the kernel never imports this package.

Data format
-----------
::

    currencies:
      - code: USD
        numeric: 840
        decimal_places: 2
        countries: [US, EC, SV]

Numeric codes are written without leading zeros (YAML would otherwise
read ``012`` as an octal number).  Quote ``"NO"`` (Norway) so YAML does
not read it as a boolean.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* ``currencies`` that is not a list  -> ``ValueError``.
* A malformed entry  -> skipped, with a ``catalog_entry_skipped`` warning.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Any

import yaml

from money_config.schema import CurrencyEntry
from money_kernel.logging_config import get_logger

logger = get_logger("config")


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Preconditions:
        - ``path`` must point to an existing, readable YAML file.
    Postconditions:
        - Returns a ``dict`` (possibly empty if the YAML is empty).
    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _parse_int(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{field} must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.lstrip("-").isdigit():
        return int(value)
    raise ValueError(f"{field} must be an integer, got {value!r}")


def parse_currency_entry(data: Any) -> CurrencyEntry:
    """
    Parse a ``CurrencyEntry`` from a dict.

    Preconditions:
        - ``data`` has ``code``, ``numeric`` and ``decimal_places`` keys;
          ``countries`` is optional.
    Raises:
        KeyError: if a required key is missing.
        ValueError: if a field has the wrong type.
    """
    if not isinstance(data, dict):
        raise ValueError(f"entry must be a mapping, got {type(data).__name__}")
    code = data["code"]
    if not isinstance(code, str):
        raise ValueError(f"code must be a string, got {code!r}")
    countries = data.get("countries") or []
    if not isinstance(countries, list) or not all(isinstance(c, str) for c in countries):
        raise ValueError(f"countries must be a list of strings, got {countries!r}")
    return CurrencyEntry(
        code=code,
        numeric_code=_parse_int(data["numeric"], "numeric"),
        decimal_places=_parse_int(data["decimal_places"], "decimal_places"),
        country_codes=tuple(countries),
    )


def iter_currency_entries(path: Path) -> Iterator[CurrencyEntry]:
    """
    Lazily yield the well-formed entries of a currency data file.

    The file is read when iteration starts.  Malformed entries are logged
    and skipped; the remaining entries are still yielded.
    """
    raw = load_yaml_file(path).get("currencies") or []
    if not isinstance(raw, list):
        raise ValueError(f"{path}: 'currencies' must be a list")
    for position, item in enumerate(raw):
        try:
            entry = parse_currency_entry(item)
        except (KeyError, ValueError) as exc:
            logger.warning(
                "catalog_entry_skipped",
                extra={
                    "path": str(path),
                    "position": position,
                    "entry": item,
                    "reason": f"{type(exc).__name__}: {exc}",
                },
            )
            continue
        yield entry


def merge_entries(
    primary: Iterable[CurrencyEntry],
    extension: Iterable[CurrencyEntry],
) -> Iterator[CurrencyEntry]:
    """
    Overlay extension entries on the primary sequence.

    An extension entry replaces the primary entry with the same code, in the
    primary's position.  Extension entries with new codes follow the primary
    entries, in extension order.  The primary sequence is consumed lazily.
    """
    overrides: dict[str, CurrencyEntry] = {}
    for entry in extension:
        overrides[entry.code] = entry
    used: set[str] = set()
    for entry in primary:
        override = overrides.get(entry.code)
        if override is not None:
            used.add(entry.code)
            yield override
        else:
            yield entry
    for code, entry in overrides.items():
        if code not in used:
            yield entry
