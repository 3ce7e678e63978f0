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

r"""Disjunctive normal form for license expressions.

A :class:`NormalizedForm` is a set of clauses joined by ``OR``; each
clause is a set of :class:`Term`\ s joined by ``AND``. A policy engine
approves an expression when at least one clause is entirely made of
allowed terms, which is what :meth:`NormalizedForm.is_satisfied_by`
checks.

``WITH`` never gets split: ``GPL-2.0-only WITH Classpath-exception-2.0``
is a single term carrying its exception. A clause-level ``WITH`` such as
``(MIT OR Apache-2.0) WITH LLVM-exception`` gives every license of the
clause its own term with the exception.

Complexity: distributing ``AND`` over ``OR`` is exponential in the
worst case (``(A OR B) AND (C OR D) AND ...`` doubles the clause count
per factor). Real license expressions have a handful of terms, so no
attempt is made to bound this; :func:`normalize` logs a warning when a
result grows past ``warn_threshold`` clauses.

Usage::

    from licensekit.normal_form import normalize
    from licensekit.parser import parse

    nf = normalize(parse('MIT AND (Apache-2.0 OR BSD-3-Clause)'))
    str(nf)  # 'Apache-2.0 AND MIT OR BSD-3-Clause AND MIT'
    nf.is_satisfied_by({'MIT', 'BSD-3-Clause'})  # True
"""

from __future__ import annotations

import functools
from collections.abc import Iterable
from dataclasses import dataclass

from licensekit.errors import ConstructionError
from licensekit.expression import (
    Compound,
    Expression,
    LicenseException,
    LicenseRef,
    Operator,
    SimpleLicense,
)
from licensekit.logging import get_logger

__all__ = [
    'DEFAULT_WARN_THRESHOLD',
    'LicenseExpression',
    'NormalizedForm',
    'Term',
    'is_equivalent',
    'is_valid_choice',
    'normalize',
    'offers_choice',
    'valid_choices',
]

log = get_logger('licensekit.normal_form')

#: Clause count above which :func:`normalize` logs a warning.
DEFAULT_WARN_THRESHOLD = 64

Clause = frozenset['Term']

#: Anything with a normal form; a bare exception only means something under WITH.
LicenseExpression = SimpleLicense | LicenseRef | Compound


@dataclass(frozen=True)
class Term:
    """An atomic license reference, optionally qualified by an exception.

    Attributes:
        license: The license or free-text reference.
        exception: The attached exception, if the term came from ``WITH``.
    """

    license: SimpleLicense | LicenseRef
    exception: LicenseException | None = None

    @property
    def or_later(self) -> bool:
        """Whether the license is "this version or later"."""
        return isinstance(self.license, SimpleLicense) and self.license.or_later

    @property
    def deprecated(self) -> bool:
        """Whether the license or its exception is deprecated in the catalog."""
        lic = isinstance(self.license, SimpleLicense) and self.license.deprecated
        return lic or (self.exception is not None and self.exception.deprecated)

    def to_expression(self) -> Expression:
        """Return the term as an AST node."""
        if self.exception is None:
            return self.license
        return Compound(self.license, Operator.WITH, self.exception)

    def __str__(self) -> str:
        return str(self.to_expression())


def _clause_key(clause: Iterable[Term]) -> list[str]:
    return sorted(str(t) for t in clause)


def _and_all(nodes: list[Expression]) -> Expression:
    return functools.reduce(lambda a, b: Compound(a, Operator.AND, b), nodes)


def _or_all(nodes: list[Expression]) -> Expression:
    return functools.reduce(lambda a, b: Compound(a, Operator.OR, b), nodes)


@dataclass(frozen=True)
class NormalizedForm:
    """An ``OR`` of ``AND``-clauses.

    Attributes:
        clauses: The clauses; each clause is a non-empty set of terms.
    """

    clauses: frozenset[Clause]

    def __len__(self) -> int:
        return len(self.clauses)

    def sorted_clauses(self) -> list[list[Term]]:
        """Return the clauses (and their terms) in a stable order."""
        ordered = [sorted(c, key=str) for c in self.clauses]
        ordered.sort(key=_clause_key)
        return ordered

    def to_expression(self) -> Expression:
        """Re-expand into an expression tree.

        The result normalizes back to the same clause set.
        """
        return _or_all([_and_all([t.to_expression() for t in clause]) for clause in self.sorted_clauses()])

    def is_satisfied_by(self, allowed: Iterable[str]) -> bool:
        """Return whether some clause consists only of *allowed* terms.

        Terms are compared by their rendered form, e.g. ``"MIT"``,
        ``"GPL-2.0+"`` or ``"GPL-2.0-only WITH Classpath-exception-2.0"``.
        """
        allowed_set = set(allowed)
        return any(all(str(t) in allowed_set for t in clause) for clause in self.clauses)

    def __str__(self) -> str:
        return str(self.to_expression())


def _clauses(root: Expression) -> set[Clause]:
    # Post-order walk with an explicit stack; each finished subtree leaves
    # its clause set on ``done``. Chains of thousands of terms are too deep
    # to recurse over.
    done: list[set[Clause]] = []
    stack: list[tuple[Expression, bool]] = [(root, False)]
    while stack:
        node, children_done = stack.pop()
        if isinstance(node, (SimpleLicense, LicenseRef)):
            done.append({frozenset({Term(node)})})
        elif isinstance(node, LicenseException):
            raise ConstructionError(f'exception {node.id!r} has no meaning outside of WITH')
        elif not isinstance(node, Compound):
            raise TypeError(f'not an expression node: {node!r}')
        elif node.operator is Operator.WITH:
            if not children_done:
                stack.append((node, True))
                stack.append((node.left, False))
                continue
            exception = node.right
            done.append({
                frozenset(Term(t.license, exception) for t in clause)  # type: ignore[arg-type]
                for clause in done.pop()
            })
        elif not children_done:
            stack.append((node, True))
            stack.append((node.right, False))
            stack.append((node.left, False))
        else:
            right = done.pop()
            left = done.pop()
            if node.operator is Operator.OR:
                left.update(right)
                done.append(left)
            else:
                done.append({a | b for a in left for b in right})
    return done.pop()


def normalize(
    expr: LicenseExpression,
    *,
    warn_threshold: int = DEFAULT_WARN_THRESHOLD,
) -> NormalizedForm:
    """Convert *expr* to its :class:`NormalizedForm`.

    Duplicate terms within a clause and duplicate clauses collapse. An
    exception on a parenthesized clause is attached to every license in
    it, so ``(MIT OR Apache-2.0) WITH LLVM-exception`` yields the clauses
    ``{MIT WITH LLVM-exception}`` and ``{Apache-2.0 WITH LLVM-exception}``.

    A bare :class:`~licensekit.expression.LicenseException` is a node
    type but not a license expression on its own: it only has a meaning
    as the right operand of ``WITH``, and cannot be normalized.

    Args:
        expr: The expression to normalize: a license, a reference, or a
            compound expression.
        warn_threshold: Log a warning when the result has more clauses
            than this.

    Returns:
        The normalized form.

    Raises:
        ConstructionError: If *expr* is a bare license exception.
    """
    clauses = _clauses(expr)
    if len(clauses) > warn_threshold:
        log.warning(
            'normalized_form_large',
            clauses=len(clauses),
            threshold=warn_threshold,
            expression=str(expr),
        )
    return NormalizedForm(frozenset(clauses))


def is_equivalent(a: LicenseExpression, b: LicenseExpression) -> bool:
    """Return whether *a* and *b* have the same normalized form."""
    return normalize(a).clauses == normalize(b).clauses


def offers_choice(expr: LicenseExpression) -> bool:
    """Return whether *expr* leaves more than one way to comply."""
    return len(normalize(expr)) > 1


def valid_choices(expr: LicenseExpression) -> list[Expression]:
    """Return each way to comply with *expr* as an ``AND``-only expression."""
    return [_and_all([t.to_expression() for t in clause]) for clause in normalize(expr).sorted_clauses()]


def is_valid_choice(choice: LicenseExpression, expr: LicenseExpression) -> bool:
    """Return whether every option left open by *choice* is an option of *expr*."""
    return normalize(choice).clauses <= normalize(expr).clauses
