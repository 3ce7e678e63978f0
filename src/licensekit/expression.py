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

r"""License expression AST and the combinators that build it.

Every node is a frozen dataclass, so trees are immutable and subtrees
can be shared freely between expressions. The node set is closed::

    Expression = SimpleLicense | LicenseRef | LicenseException | Compound

Consumers (stringification here, :mod:`licensekit.normal_form`) dispatch
on exactly these four types.

Or-later handling::

    ┌───────────────────────┬──────────────────┬───────────┐
    │ Catalog id            │ SimpleLicense.id │ or_later  │
    ├───────────────────────┼──────────────────┼───────────┤
    │ GPL-2.0+ (deprecated) │ GPL-2.0          │ True      │
    │ GPL-2.0 (deprecated)  │ GPL-2.0          │ False     │
    │ GPL-3.0-or-later      │ GPL-3.0-or-later │ True      │
    │ GPL-3.0-only          │ GPL-3.0-only     │ False     │
    │ MIT                   │ MIT              │ False     │
    └───────────────────────┴──────────────────┴───────────┘

Usage::

    from licensekit.catalog import default_catalog
    from licensekit.expression import license_and, license_or, license_with

    cat = default_catalog()
    mit = cat.lookup_license('MIT')
    gpl = cat.lookup_license('GPL-2.0-or-later')
    cpe = cat.lookup_exception('Classpath-exception-2.0')

    expr = license_and(mit, license_or(cat.lookup_license('Apache-2.0'), license_with(gpl, cpe)))
    str(expr)  # 'MIT AND (Apache-2.0 OR GPL-2.0-or-later WITH Classpath-exception-2.0)'
"""

from __future__ import annotations

import enum
from collections.abc import Iterator
from dataclasses import dataclass, field

from licensekit.catalog import SpdxLicense, SpdxLicenseException
from licensekit.errors import ConstructionError

__all__ = [
    'Compound',
    'Expression',
    'LicenseException',
    'LicenseRef',
    'Operator',
    'SimpleLicense',
    'decompose',
    'exception_ids',
    'license_and',
    'license_ids',
    'license_or',
    'license_with',
    'to_expression',
    'to_string',
]

_OR_LATER_SUFFIX = '-or-later'


class Operator(enum.Enum):
    """Binary operators of the expression grammar.

    The value is the binding strength: higher binds tighter.
    """

    OR = 0
    AND = 1
    WITH = 2

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class SimpleLicense:
    """A license known to the catalog.

    Attributes:
        id: The license identifier, with any legacy ``+`` removed.
        or_later: "This version or any later version."
        deprecated: Whether the catalog marks the identifier deprecated.
            Informational only; not part of equality.
    """

    id: str
    or_later: bool = False
    deprecated: bool = field(default=False, compare=False)

    def __str__(self) -> str:
        """Return the identifier, with ``+`` if or-later isn't already spelled out."""
        if self.or_later and not self.id.endswith(_OR_LATER_SUFFIX):
            return f'{self.id}+'
        return self.id


@dataclass(frozen=True)
class LicenseRef:
    """A reference not present in the catalog, carried verbatim.

    Attributes:
        raw: The identifier exactly as it appeared in the input.
    """

    raw: str

    def __str__(self) -> str:
        return self.raw


@dataclass(frozen=True)
class LicenseException:
    """A license exception, only valid as the right operand of ``WITH``.

    Attributes:
        id: The exception identifier.
        deprecated: Whether the catalog marks the identifier deprecated.
            Not part of equality.
    """

    id: str
    deprecated: bool = field(default=False, compare=False)

    def __str__(self) -> str:
        return self.id


@dataclass(frozen=True)
class Compound:
    """Two expressions joined by an :class:`Operator`.

    ``WITH`` takes a license, a reference, or an ``AND``/``OR`` clause
    on the left (``(MIT OR Apache-2.0) WITH LLVM-exception`` attaches the
    exception to every license of the clause), and a
    :class:`LicenseException` on the right.

    Attributes:
        left: Left operand.
        operator: The joining operator.
        right: Right operand.

    Raises:
        ConstructionError: If the operands don't fit the operator:
            the left of ``WITH`` must not itself contain a ``WITH`` or be
            a bare exception, its right must be an exception, and
            ``AND``/``OR`` never take a bare exception.
    """

    left: Expression
    operator: Operator
    right: Expression

    def __post_init__(self) -> None:
        if self.operator is Operator.WITH:
            if isinstance(self.left, LicenseException):
                raise ConstructionError(f'WITH requires a license on the left, got exception {self.left.id!r}')
            if _contains_with(self.left):
                raise ConstructionError('WITH cannot be nested inside the left operand of another WITH')
            if not isinstance(self.right, LicenseException):
                raise ConstructionError(f'WITH requires an exception on the right, got {type(self.right).__name__}')
            return
        for operand in (self.left, self.right):
            if isinstance(operand, LicenseException):
                raise ConstructionError(f'exception {operand.id!r} can only be attached with WITH, not {self.operator}')

    def __str__(self) -> str:
        """Render with parentheses only around looser-binding children."""
        return _render(self)


Expression = SimpleLicense | LicenseRef | LicenseException | Compound


def _contains_with(node: Expression) -> bool:
    stack = [node]
    while stack:
        current = stack.pop()
        if isinstance(current, Compound):
            if current.operator is Operator.WITH:
                return True
            stack.extend((current.left, current.right))
    return False


def _push_operand(stack: list[Expression | str], node: Expression, parent: Operator) -> None:
    # Pushed in reverse; the stack pops "(", node, ")".
    if isinstance(node, Compound) and node.operator.value < parent.value:
        stack.extend((')', node, '('))
    else:
        stack.append(node)


def _render(root: Compound) -> str:
    # Explicit stack: scanner output can hold chains of thousands of
    # terms, deeper than the interpreter's recursion limit.
    parts: list[str] = []
    stack: list[Expression | str] = [root]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            parts.append(item)
        elif isinstance(item, Compound):
            _push_operand(stack, item.right, item.operator)
            stack.append(f' {item.operator} ')
            _push_operand(stack, item.left, item.operator)
        else:
            parts.append(str(item))
    return ''.join(parts)


def to_string(expr: Expression) -> str:
    """Render *expr* back to expression syntax.

    ``parse(to_string(e))`` is semantically equivalent to ``e``; redundant
    parentheses are not reproduced, and since ``AND``/``OR`` are
    associative a right-nested chain renders flat.
    """
    return str(expr)


def to_expression(entry: SpdxLicense | SpdxLicenseException) -> SimpleLicense | LicenseException:
    """Convert a catalog entry into an AST leaf.

    For licenses the or-later flag depends on the deprecated flag:
    deprecated ids spell "or later" as a trailing ``+`` (which is
    removed from the leaf's id), current ids spell it as part of the id
    (``-or-later``, which is kept).

    Exceptions are wrapped verbatim.
    """
    if isinstance(entry, SpdxLicenseException):
        return LicenseException(id=entry.id, deprecated=entry.deprecated)
    if entry.deprecated:
        expression_id = entry.id.removesuffix('+')
        or_later = expression_id != entry.id
    else:
        expression_id = entry.id
        or_later = entry.id.endswith(_OR_LATER_SUFFIX)
    return SimpleLicense(id=expression_id, or_later=or_later, deprecated=entry.deprecated)


def _operand(value: SpdxLicense | Expression) -> Expression:
    if isinstance(value, SpdxLicense):
        return to_expression(value)
    if isinstance(value, (SimpleLicense, LicenseRef, LicenseException, Compound)):
        return value
    raise ConstructionError(f'expected a license or an expression, got {type(value).__name__}')


def license_and(left: SpdxLicense | Expression, right: SpdxLicense | Expression) -> Compound:
    """Join *left* and *right* with ``AND``."""
    return Compound(_operand(left), Operator.AND, _operand(right))


def license_or(left: SpdxLicense | Expression, right: SpdxLicense | Expression) -> Compound:
    """Join *left* and *right* with ``OR``."""
    return Compound(_operand(left), Operator.OR, _operand(right))


def license_with(
    license: SpdxLicense | SimpleLicense | LicenseRef,  # noqa: A002
    exception: SpdxLicenseException | LicenseException,
) -> Compound:
    """Attach *exception* to a single *license*.

    Raises:
        ConstructionError: If *license* is not a single license or
            reference, or *exception* is not an exception.
    """
    if isinstance(license, SpdxLicense):
        license = to_expression(license)  # noqa: A001
    if not isinstance(license, (SimpleLicense, LicenseRef)):
        raise ConstructionError(f'an exception can only be attached to a single license, got {license!s}')
    if isinstance(exception, SpdxLicenseException):
        exception = to_expression(exception)
    if not isinstance(exception, LicenseException):
        raise ConstructionError(f'expected a license exception, got {type(exception).__name__}')
    return Compound(license, Operator.WITH, exception)


def _leaves(expr: Expression) -> Iterator[SimpleLicense | LicenseRef | LicenseException]:
    stack = [expr]
    while stack:
        node = stack.pop()
        if isinstance(node, Compound):
            stack.extend((node.right, node.left))
        elif isinstance(node, (SimpleLicense, LicenseRef, LicenseException)):
            yield node
        else:
            raise TypeError(f'not an expression node: {node!r}')


def license_ids(expr: Expression) -> set[str]:
    """Collect the license and reference identifiers in *expr*.

    Exceptions are not included; ids are as stored on the leaves (so
    ``GPL-2.0+`` contributes ``GPL-2.0``).
    """
    ids: set[str] = set()
    for leaf in _leaves(expr):
        if isinstance(leaf, SimpleLicense):
            ids.add(leaf.id)
        elif isinstance(leaf, LicenseRef):
            ids.add(leaf.raw)
    return ids


def exception_ids(expr: Expression) -> set[str]:
    """Collect the exception identifiers in *expr*."""
    return {leaf.id for leaf in _leaves(expr) if isinstance(leaf, LicenseException)}


def decompose(expr: Expression) -> frozenset[Expression]:
    """Split *expr* into its top-level ``AND`` operands.

    ``A AND (B OR C) AND D`` decomposes into ``{A, B OR C, D}``; anything
    that is not an ``AND`` decomposes into itself.
    """
    operands: set[Expression] = set()
    stack = [expr]
    while stack:
        node = stack.pop()
        if isinstance(node, Compound) and node.operator is Operator.AND:
            stack.extend((node.left, node.right))
        else:
            operands.add(node)
    return frozenset(operands)
