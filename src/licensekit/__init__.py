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

r"""License expression engine.

Parses SPDX-style license expressions into an immutable AST, builds them
programmatically, renders them back to text, and decomposes them into a
disjunctive normal form that policy engines can test with set
membership. Also matches scanner-generated ``LicenseRef-`` tokens
against canonical names.

Nothing here touches the network or the filesystem beyond loading the
bundled catalog and optional TOML configuration.

Usage::

    from licensekit import normalize, parse

    expr = parse('MIT AND (Apache-2.0 OR GPL-2.0-or-later WITH Classpath-exception-2.0)')
    nf = normalize(expr)
    assert len(nf) == 2
    assert nf.is_satisfied_by({'MIT', 'Apache-2.0'})

    from licensekit import is_license_ref_to

    assert is_license_ref_to('LicenseRef-scancode-public-domain', 'public-domain')
"""

from licensekit.catalog import (
    LicenseCatalog,
    SpdxLicense,
    SpdxLicenseException,
    default_catalog,
)
from licensekit.config import LicenseKitConfig, load_config
from licensekit.errors import (
    CatalogDataError,
    ConfigError,
    ConstructionError,
    LicenseKitError,
    ParseError,
)
from licensekit.expression import (
    Compound,
    Expression,
    LicenseException,
    LicenseRef,
    Operator,
    SimpleLicense,
    decompose,
    exception_ids,
    license_and,
    license_ids,
    license_or,
    license_with,
    to_expression,
    to_string,
)
from licensekit.normal_form import (
    LicenseExpression,
    NormalizedForm,
    Term,
    is_equivalent,
    is_valid_choice,
    normalize,
    offers_choice,
    valid_choices,
)
from licensekit.parser import Strictness, parse
from licensekit.refs import DEFAULT_NAMESPACES, find_license_ref_target, is_license_ref_to

__version__ = '0.1.0'

__all__ = [
    'CatalogDataError',
    'Compound',
    'ConfigError',
    'ConstructionError',
    'DEFAULT_NAMESPACES',
    'Expression',
    'LicenseCatalog',
    'LicenseException',
    'LicenseExpression',
    'LicenseKitConfig',
    'LicenseKitError',
    'LicenseRef',
    'NormalizedForm',
    'Operator',
    'ParseError',
    'SimpleLicense',
    'SpdxLicense',
    'SpdxLicenseException',
    'Strictness',
    'Term',
    'decompose',
    'default_catalog',
    'exception_ids',
    'find_license_ref_target',
    'is_equivalent',
    'is_license_ref_to',
    'is_valid_choice',
    'license_and',
    'license_ids',
    'license_or',
    'license_with',
    'load_config',
    'normalize',
    'offers_choice',
    'parse',
    'to_expression',
    'to_string',
    'valid_choices',
]
