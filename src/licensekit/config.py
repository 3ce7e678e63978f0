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

"""Configuration for tools embedding licensekit.

Settings are read from ``licensekit.toml`` or, failing that, from the
``[tool.licensekit]`` table of ``pyproject.toml``::

    # licensekit.toml
    scanner_namespaces = ["scancode", "ORT", "MyScanner"]
    catalog_overrides = "licenses-extra.toml"
    warn_clause_threshold = 32
    strictness = "allow-deprecated"

All keys are optional. ``catalog_overrides`` is resolved relative to the
file that declares it.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from licensekit.catalog import LicenseCatalog, default_catalog
from licensekit.errors import ConfigError
from licensekit.normal_form import DEFAULT_WARN_THRESHOLD
from licensekit.parser import Strictness
from licensekit.refs import DEFAULT_NAMESPACES

__all__ = [
    'CONFIG_FILENAME',
    'LicenseKitConfig',
    'load_config',
]

CONFIG_FILENAME = 'licensekit.toml'
_PYPROJECT = 'pyproject.toml'

_KNOWN_KEYS = frozenset({
    'scanner_namespaces',
    'catalog_overrides',
    'warn_clause_threshold',
    'strictness',
})


@dataclass(frozen=True)
class LicenseKitConfig:
    """Resolved licensekit settings.

    Attributes:
        scanner_namespaces: Tool namespaces accepted in ``LicenseRef-``
            tokens.
        catalog_overrides: Extra catalog TOML merged over the built-in
            data, or ``None``.
        warn_clause_threshold: Normalized-form size that triggers a
            warning.
        strictness: Identifier strictness for parsing.
        source: The file the settings came from, or ``None`` for defaults.
    """

    scanner_namespaces: tuple[str, ...] = DEFAULT_NAMESPACES
    catalog_overrides: Path | None = None
    warn_clause_threshold: int = DEFAULT_WARN_THRESHOLD
    strictness: Strictness = Strictness.ALLOW_ANY
    source: Path | None = field(default=None, compare=False)

    def load_catalog(self) -> LicenseCatalog:
        """Return the catalog these settings describe."""
        if self.catalog_overrides is None:
            return default_catalog()
        return LicenseCatalog.load(user_toml=self.catalog_overrides)


def _from_table(table: dict[str, Any], path: Path) -> LicenseKitConfig:
    unknown = sorted(set(table) - _KNOWN_KEYS)
    if unknown:
        raise ConfigError(f'unknown key(s): {", ".join(unknown)}', path)

    kwargs: dict[str, Any] = {'source': path}

    if 'scanner_namespaces' in table:
        namespaces = table['scanner_namespaces']
        if not isinstance(namespaces, list) or not all(isinstance(n, str) and n for n in namespaces):
            raise ConfigError('scanner_namespaces: expected a list of non-empty strings', path)
        kwargs['scanner_namespaces'] = tuple(namespaces)

    if 'catalog_overrides' in table:
        overrides = table['catalog_overrides']
        if not isinstance(overrides, str):
            raise ConfigError(f'catalog_overrides: expected string, got {type(overrides).__name__}', path)
        resolved = (path.parent / overrides).resolve()
        if not resolved.is_file():
            raise ConfigError(f'catalog_overrides: {resolved} does not exist', path)
        kwargs['catalog_overrides'] = resolved

    if 'warn_clause_threshold' in table:
        threshold = table['warn_clause_threshold']
        # bool is an int subclass; reject it explicitly.
        if not isinstance(threshold, int) or isinstance(threshold, bool) or threshold < 1:
            raise ConfigError('warn_clause_threshold: expected a positive integer', path)
        kwargs['warn_clause_threshold'] = threshold

    if 'strictness' in table:
        try:
            kwargs['strictness'] = Strictness(table['strictness'])
        except ValueError:
            choices = ', '.join(s.value for s in Strictness)
            raise ConfigError(f'strictness: {table["strictness"]!r} is not one of {choices}', path) from None

    return LicenseKitConfig(**kwargs)


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open('rb') as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f'invalid TOML: {exc}', path) from exc


def load_config(path: Path | None = None, *, start_dir: Path | None = None) -> LicenseKitConfig:
    """Load licensekit settings.

    Args:
        path: Explicit config file. A ``pyproject.toml`` is read from its
            ``[tool.licensekit]`` table, any other file as a whole.
        start_dir: Directory searched for ``licensekit.toml`` then
            ``pyproject.toml`` when *path* is not given. Defaults to the
            current directory.

    Returns:
        The settings, or defaults when no configuration is found.

    Raises:
        ConfigError: If the file is unreadable TOML or has invalid values.
    """
    if path is None:
        base = start_dir or Path.cwd()
        candidate = base / CONFIG_FILENAME
        if candidate.is_file():
            path = candidate
        elif (base / _PYPROJECT).is_file():
            path = base / _PYPROJECT
        else:
            return LicenseKitConfig()
    elif not path.is_file():
        raise ConfigError('config file not found', path)

    data = _read_toml(path)
    if path.name == _PYPROJECT:
        tool = data.get('tool', {})
        if not isinstance(tool, dict):
            raise ConfigError('[tool] must be a table', path)
        table = tool.get('licensekit')
        if table is None:
            return LicenseKitConfig()
        if not isinstance(table, dict):
            raise ConfigError('[tool.licensekit] must be a table', path)
        return _from_table(table, path)
    return _from_table(data, path)
