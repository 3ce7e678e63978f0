# Copyright 2026 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
# SPDX-License-Identifier: Apache-2.0

r"""Read-only catalog of canonical license and exception identifiers.

The catalog is loaded once from TOML and never mutated afterwards. To
pick up new data, load a new :class:`LicenseCatalog` and swap the
reference; existing expressions are unaffected.

Key Concepts::

    ┌─────────────────────┬──────────────────────────────────────────────┐
    │ Concept              │ Plain-English                                │
    ├─────────────────────┼──────────────────────────────────────────────┤
    │ Deprecated id        │ Superseded, but still resolvable so older   │
    │                      │ manifests keep parsing. Callers may warn.   │
    ├─────────────────────┼──────────────────────────────────────────────┤
    │ "GPL-2.0+"           │ Legacy or-later spelling. Only deprecated   │
    │                      │ ids may carry a trailing "+".               │
    ├─────────────────────┼──────────────────────────────────────────────┤
    │ or_later_eligible    │ The license family has a "-or-later" form.  │
    └─────────────────────┴──────────────────────────────────────────────┘

Usage::

    from licensekit.catalog import default_catalog

    catalog = default_catalog()
    catalog.lookup_license('MIT')  # SpdxLicense(id='MIT', ...)
    catalog.lookup_license('mit')  # None, ids are case-sensitive
    catalog.lookup_exception('Classpath-exception-2.0')
"""

from __future__ import annotations

import functools
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from licensekit.errors import CatalogDataError
from licensekit.logging import get_logger

__all__ = [
    'LicenseCatalog',
    'SpdxLicense',
    'SpdxLicenseException',
    'default_catalog',
]

log = get_logger('licensekit.catalog')

_DATA_DIR = Path(__file__).resolve().parent / 'data'
_CATALOG_TOML = _DATA_DIR / 'catalog.toml'

_OR_LATER_SUFFIX = '-or-later'
_ONLY_SUFFIX = '-only'


@dataclass(frozen=True)
class SpdxLicense:
    """A canonical license identifier.

    Attributes:
        id: Case-sensitive canonical identifier (e.g. ``"GPL-2.0+"``).
        name: Human-readable full name.
        deprecated: Whether the identifier has been superseded.
        or_later_eligible: Whether the license family has an
            ``-or-later`` variant.
    """

    id: str
    name: str
    deprecated: bool = False
    or_later_eligible: bool = False


@dataclass(frozen=True)
class SpdxLicenseException:
    """A canonical license exception identifier.

    Attributes:
        id: Case-sensitive canonical identifier.
        name: Human-readable full name.
        deprecated: Whether the identifier has been superseded.
    """

    id: str
    name: str
    deprecated: bool = False


def _family_base(license_id: str) -> str:
    """Strip the version-range suffix from *license_id*."""
    for suffix in ('+', _OR_LATER_SUFFIX, _ONLY_SUFFIX):
        if license_id.endswith(suffix):
            return license_id[: -len(suffix)]
    return license_id


def _validate_entry(section: str, entry_id: str, info: object, errors: list[str]) -> bool:
    """Append problems with one TOML table to *errors*; return ``True`` if usable."""
    where = f'[{section}."{entry_id}"]'
    if not isinstance(info, dict):
        errors.append(f'{where}: expected a table, got {type(info).__name__}')
        return False
    ok = True
    if 'name' not in info:
        errors.append(f'{where}: missing required field "name"')
        ok = False
    elif not isinstance(info['name'], str):
        errors.append(f'{where}.name: expected string, got {type(info["name"]).__name__}')
        ok = False
    for flag in ('deprecated', 'or_later_eligible'):
        if flag in info and not isinstance(info[flag], bool):
            errors.append(f'{where}.{flag}: expected bool, got {type(info[flag]).__name__}')
            ok = False
    if not entry_id.strip() or any(c.isspace() for c in entry_id):
        errors.append(f'{where}: identifier must be non-empty and contain no whitespace')
        ok = False
    return ok


@dataclass(frozen=True, eq=False)
class LicenseCatalog:
    """Immutable registry of licenses and exceptions.

    Attributes:
        licenses: Mapping from license id to :class:`SpdxLicense`.
        exceptions: Mapping from exception id to
            :class:`SpdxLicenseException`.
    """

    licenses: Mapping[str, SpdxLicense]
    exceptions: Mapping[str, SpdxLicenseException]

    @classmethod
    def load(
        cls,
        *,
        catalog_toml: Path | None = None,
        user_toml: Path | None = None,
    ) -> LicenseCatalog:
        """Load the catalog from TOML data files.

        Args:
            catalog_toml: Path to the catalog TOML. Defaults to the
                built-in ``data/catalog.toml``.
            user_toml: Optional TOML of the same shape whose entries are
                merged on top of the built-in data (fields of an existing
                entry are overridden, new entries are added).

        Returns:
            A validated, read-only :class:`LicenseCatalog`.

        Raises:
            CatalogDataError: If a file is not valid TOML or any entry fails
                validation.
        """
        raw_licenses: dict[str, dict[str, Any]] = {}
        raw_exceptions: dict[str, dict[str, Any]] = {}
        errors: list[str] = []

        sources = [catalog_toml or _CATALOG_TOML]
        if user_toml is not None:
            sources.append(user_toml)
        for path in sources:
            try:
                with path.open('rb') as f:
                    data = tomllib.load(f)
            except tomllib.TOMLDecodeError as exc:
                raise CatalogDataError([f'{path}: invalid TOML: {exc}']) from exc
            _merge_section(data, 'licenses', raw_licenses, errors)
            _merge_section(data, 'exceptions', raw_exceptions, errors)

        licenses: dict[str, SpdxLicense] = {}
        for license_id, info in raw_licenses.items():
            deprecated = info.get('deprecated', False)
            if license_id.endswith('+') and not deprecated:
                errors.append(f'[licenses."{license_id}"]: only deprecated ids may end with "+"')
            eligible = info.get('or_later_eligible')
            if eligible is None:
                eligible = f'{_family_base(license_id)}{_OR_LATER_SUFFIX}' in raw_licenses
            licenses[license_id] = SpdxLicense(
                id=license_id,
                name=info['name'],
                deprecated=deprecated,
                or_later_eligible=eligible,
            )

        exceptions: dict[str, SpdxLicenseException] = {}
        for exception_id, info in raw_exceptions.items():
            if exception_id in licenses:
                errors.append(f'"{exception_id}" is registered as both a license and an exception')
            exceptions[exception_id] = SpdxLicenseException(
                id=exception_id,
                name=info['name'],
                deprecated=info.get('deprecated', False),
            )

        if errors:
            raise CatalogDataError(errors)

        log.debug(
            'catalog_loaded',
            licenses=len(licenses),
            exceptions=len(exceptions),
            user_toml=str(user_toml) if user_toml else None,
        )
        return cls(
            licenses=MappingProxyType(licenses),
            exceptions=MappingProxyType(exceptions),
        )

    def lookup_license(self, license_id: str) -> SpdxLicense | None:
        """Return the license registered under *license_id*, or ``None``."""
        return self.licenses.get(license_id)

    def lookup_exception(self, exception_id: str) -> SpdxLicenseException | None:
        """Return the exception registered under *exception_id*, or ``None``."""
        return self.exceptions.get(exception_id)

    def deprecated_licenses(self) -> frozenset[str]:
        """Return the ids of all deprecated licenses."""
        return frozenset(k for k, v in self.licenses.items() if v.deprecated)


def _merge_section(
    data: dict[str, Any],
    section: str,
    into: dict[str, dict[str, Any]],
    errors: list[str],
) -> None:
    table = data.get(section, {})
    if not isinstance(table, dict):
        errors.append(f'"{section}" must be a table, got {type(table).__name__}')
        return
    for entry_id, info in table.items():
        existing = into.get(entry_id)
        if existing is not None and isinstance(info, dict):
            # Overrides may omit "name" for an entry that already has one.
            info = {**existing, **info}
        if _validate_entry(section, entry_id, info, errors):
            into[entry_id] = info


@functools.cache
def default_catalog() -> LicenseCatalog:
    """Return the built-in catalog, loaded once per process."""
    return LicenseCatalog.load()
