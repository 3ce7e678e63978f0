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

"""Tests for the license catalog."""

from __future__ import annotations

from pathlib import Path

import pytest
from licensekit.catalog import LicenseCatalog, default_catalog
from licensekit.errors import CatalogDataError
from licensekit.expression import LicenseRef, SimpleLicense
from licensekit.parser import parse


@pytest.fixture()
def catalog() -> LicenseCatalog:
    """Load the built-in catalog."""
    return LicenseCatalog.load()


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding='utf-8')
    return path


class TestLoading:
    """Tests for loading."""

    def test_loads_licenses(self, catalog: LicenseCatalog) -> None:
        """Test loads licenses."""
        assert len(catalog.licenses) >= 80

    def test_loads_exceptions(self, catalog: LicenseCatalog) -> None:
        """Test loads exceptions."""
        assert len(catalog.exceptions) >= 15

    def test_default_catalog_is_shared(self) -> None:
        """Test default catalog is shared."""
        assert default_catalog() is default_catalog()

    def test_no_id_is_both(self, catalog: LicenseCatalog) -> None:
        """Test no id is both."""
        assert not set(catalog.licenses) & set(catalog.exceptions)

    def test_plus_ids_are_deprecated(self, catalog: LicenseCatalog) -> None:
        """Test plus ids are deprecated."""
        plus_ids = [i for i in catalog.licenses if i.endswith('+')]
        assert plus_ids
        assert all(catalog.licenses[i].deprecated for i in plus_ids)


class TestLookup:
    """Tests for lookups."""

    def test_lookup_license(self, catalog: LicenseCatalog) -> None:
        """Test lookup license."""
        mit = catalog.lookup_license('MIT')
        assert mit is not None
        assert mit.id == 'MIT'
        assert mit.name == 'MIT License'
        assert mit.deprecated is False

    def test_lookup_is_case_sensitive(self, catalog: LicenseCatalog) -> None:
        """Test lookup is case sensitive."""
        assert catalog.lookup_license('mit') is None

    def test_lookup_missing(self, catalog: LicenseCatalog) -> None:
        """Test lookup missing."""
        assert catalog.lookup_license('NoSuchLicense-99.0') is None
        assert catalog.lookup_exception('NoSuchException') is None

    def test_deprecated_resolvable(self, catalog: LicenseCatalog) -> None:
        """Test deprecated resolvable."""
        entry = catalog.lookup_license('GPL-2.0+')
        assert entry is not None
        assert entry.deprecated is True

    def test_lookup_exception(self, catalog: LicenseCatalog) -> None:
        """Test lookup exception."""
        exc = catalog.lookup_exception('Classpath-exception-2.0')
        assert exc is not None
        assert exc.deprecated is False

    def test_license_is_not_an_exception(self, catalog: LicenseCatalog) -> None:
        """Test license is not an exception."""
        assert catalog.lookup_exception('MIT') is None

    def test_deprecated_licenses(self, catalog: LicenseCatalog) -> None:
        """Test deprecated licenses."""
        deprecated = catalog.deprecated_licenses()
        assert {'GPL-2.0', 'GPL-2.0+', 'LGPL-2.1+'} <= deprecated
        assert 'MIT' not in deprecated


class TestOrLaterEligible:
    """Tests for or_later_eligible derivation."""

    @pytest.mark.parametrize('license_id', ['GPL-2.0-only', 'GPL-2.0-or-later', 'GPL-2.0', 'GPL-2.0+', 'LGPL-2.1-only'])
    def test_eligible(self, catalog: LicenseCatalog, license_id: str) -> None:
        """Test eligible."""
        entry = catalog.lookup_license(license_id)
        assert entry is not None
        assert entry.or_later_eligible is True

    @pytest.mark.parametrize('license_id', ['MIT', 'Apache-2.0', 'GPL-2.0-with-classpath-exception'])
    def test_not_eligible(self, catalog: LicenseCatalog, license_id: str) -> None:
        """Test not eligible."""
        entry = catalog.lookup_license(license_id)
        assert entry is not None
        assert entry.or_later_eligible is False


class TestImmutability:
    """Tests that the catalog cannot be mutated."""

    def test_mapping_is_read_only(self, catalog: LicenseCatalog) -> None:
        """Test mapping is read only."""
        with pytest.raises(TypeError):
            catalog.licenses['Foo'] = catalog.licenses['MIT']  # type: ignore[index]

    def test_attributes_frozen(self, catalog: LicenseCatalog) -> None:
        """Test attributes frozen."""
        with pytest.raises(AttributeError):
            catalog.licenses = {}  # type: ignore[misc]


class TestUserOverrides:
    """Tests for merging user TOML."""

    def test_adds_license(self, tmp_path: Path) -> None:
        """Test adds license."""
        user = _write(
            tmp_path / 'extra.toml',
            '[licenses."Acme-1.0"]\nname = "Acme License 1.0"\n',
        )
        catalog = LicenseCatalog.load(user_toml=user)
        entry = catalog.lookup_license('Acme-1.0')
        assert entry is not None
        assert entry.name == 'Acme License 1.0'
        assert parse('Acme-1.0', catalog=catalog) == SimpleLicense('Acme-1.0')
        assert parse('Acme-1.0') == LicenseRef('Acme-1.0')

    def test_overrides_existing_field(self, tmp_path: Path) -> None:
        """Test overrides existing field."""
        user = _write(tmp_path / 'extra.toml', '[licenses."MIT"]\ndeprecated = true\n')
        catalog = LicenseCatalog.load(user_toml=user)
        entry = catalog.lookup_license('MIT')
        assert entry is not None
        assert entry.deprecated is True
        assert entry.name == 'MIT License'

    def test_adds_exception(self, tmp_path: Path) -> None:
        """Test adds exception."""
        user = _write(
            tmp_path / 'extra.toml',
            '[exceptions."Acme-exception"]\nname = "Acme linking exception"\n',
        )
        catalog = LicenseCatalog.load(user_toml=user)
        assert catalog.lookup_exception('Acme-exception') is not None

    def test_explicit_or_later_eligible(self, tmp_path: Path) -> None:
        """Test explicit or later eligible."""
        user = _write(
            tmp_path / 'extra.toml',
            '[licenses."Acme-1.0"]\nname = "Acme"\nor_later_eligible = true\n',
        )
        entry = LicenseCatalog.load(user_toml=user).lookup_license('Acme-1.0')
        assert entry is not None
        assert entry.or_later_eligible is True


class TestValidation:
    """Tests for catalog data validation."""

    def test_missing_name(self, tmp_path: Path) -> None:
        """Test missing name."""
        path = _write(tmp_path / 'cat.toml', '[licenses."Foo"]\ndeprecated = false\n')
        with pytest.raises(CatalogDataError, match='missing required field "name"'):
            LicenseCatalog.load(catalog_toml=path)

    def test_bad_deprecated_type(self, tmp_path: Path) -> None:
        """Test bad deprecated type."""
        path = _write(tmp_path / 'cat.toml', '[licenses."Foo"]\nname = "Foo"\ndeprecated = "yes"\n')
        with pytest.raises(CatalogDataError, match='expected bool'):
            LicenseCatalog.load(catalog_toml=path)

    def test_plus_id_must_be_deprecated(self, tmp_path: Path) -> None:
        """Test plus id must be deprecated."""
        path = _write(tmp_path / 'cat.toml', '[licenses."Foo+"]\nname = "Foo"\n')
        with pytest.raises(CatalogDataError, match='only deprecated ids may end with'):
            LicenseCatalog.load(catalog_toml=path)

    def test_id_in_both_sections(self, tmp_path: Path) -> None:
        """Test id in both sections."""
        path = _write(
            tmp_path / 'cat.toml',
            '[licenses."Foo"]\nname = "Foo"\n\n[exceptions."Foo"]\nname = "Foo"\n',
        )
        with pytest.raises(CatalogDataError, match='both a license and an exception'):
            LicenseCatalog.load(catalog_toml=path)

    def test_collects_all_errors(self, tmp_path: Path) -> None:
        """Test collects all errors."""
        path = _write(
            tmp_path / 'cat.toml',
            '[licenses."A"]\ndeprecated = 1\n\n[licenses."B"]\nname = 3\n',
        )
        with pytest.raises(CatalogDataError) as exc_info:
            LicenseCatalog.load(catalog_toml=path)
        assert len(exc_info.value.errors) == 3

    def test_entry_not_a_table(self, tmp_path: Path) -> None:
        """Test entry not a table."""
        path = _write(tmp_path / 'cat.toml', '[licenses]\nFoo = "bar"\n')
        with pytest.raises(CatalogDataError, match='expected a table'):
            LicenseCatalog.load(catalog_toml=path)

    def test_invalid_toml(self, tmp_path: Path) -> None:
        """Test invalid toml."""
        path = _write(tmp_path / 'cat.toml', '[licenses."Foo"\nname = "Foo"\n')
        with pytest.raises(CatalogDataError, match='invalid TOML'):
            LicenseCatalog.load(catalog_toml=path)

    def test_invalid_user_toml(self, tmp_path: Path) -> None:
        """Test invalid user toml."""
        user = _write(tmp_path / 'extra.toml', 'licenses = [\n')
        with pytest.raises(CatalogDataError, match='extra.toml: invalid TOML'):
            LicenseCatalog.load(user_toml=user)
