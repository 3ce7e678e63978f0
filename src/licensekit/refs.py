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

"""Matching of scanner-generated ``LicenseRef-`` references.

Scanners report licenses that have no SPDX id as synthetic references,
optionally namespaced by the tool that produced them::

    LicenseRef-public-domain             (no namespace)
    LicenseRef-scancode-public-domain    (namespace "scancode")

:func:`is_license_ref_to` decides whether such a token denotes a given
name, so findings can be mapped back before they reach the parser.
"""

from __future__ import annotations

from collections.abc import Iterable

__all__ = [
    'DEFAULT_NAMESPACES',
    'LICENSE_REF_PREFIX',
    'find_license_ref_target',
    'is_license_ref_to',
]

LICENSE_REF_PREFIX = 'LicenseRef-'

#: Tool namespaces recognized by default.
DEFAULT_NAMESPACES: tuple[str, ...] = ('ORT', 'Askalono', 'BoyterLc', 'Licensee', 'scancode')


def is_license_ref_to(
    candidate: str,
    name: str,
    *,
    ignore_case: bool = True,
    namespaces: Iterable[str] = DEFAULT_NAMESPACES,
) -> bool:
    """Return whether *candidate* is a ``LicenseRef-`` to *name*.

    Args:
        candidate: The token reported by a scanner.
        name: The bare license name, e.g. ``"public-domain"``.
        ignore_case: Compare *name* case-insensitively.
        namespaces: Accepted tool namespaces. Namespaces always compare
            case-insensitively.

    Returns:
        ``True`` for ``LicenseRef-<name>`` and
        ``LicenseRef-<namespace>-<name>`` with a known namespace.

    Examples::

        >>> is_license_ref_to('LicenseRef-scancode-public-domain', 'public-domain')
        True
        >>> is_license_ref_to('LicenseRef-unknown-tool-public-domain', 'public-domain')
        False
    """
    if not name.strip() or name.startswith('-') or name.endswith('-'):
        return False

    without_prefix = candidate.removeprefix(LICENSE_REF_PREFIX)
    if without_prefix == candidate:
        return False

    if len(without_prefix) < len(name):
        return False
    tail = without_prefix[len(without_prefix) - len(name) :]
    if (tail.casefold() != name.casefold()) if ignore_case else (tail != name):
        return False

    infix = without_prefix[: len(without_prefix) - len(name)]
    if not infix:
        return True

    namespace = infix.removesuffix('-')
    if namespace == infix:
        return False

    folded = namespace.casefold()
    return any(ns.casefold() == folded for ns in namespaces)


def find_license_ref_target(
    candidate: str,
    names: Iterable[str],
    *,
    ignore_case: bool = True,
    namespaces: Iterable[str] = DEFAULT_NAMESPACES,
) -> str | None:
    """Return the name from *names* that *candidate* refers to, if any.

    Longer names are tried first, so with both ``scancode-public-domain``
    and ``public-domain`` known, ``LicenseRef-scancode-public-domain``
    resolves to the former.
    """
    namespaces = tuple(namespaces)
    for name in sorted(set(names), key=lambda n: (-len(n), n)):
        if is_license_ref_to(candidate, name, ignore_case=ignore_case, namespaces=namespaces):
            return name
    return None
