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

r"""License expression parser.

Grammar::

    idstring         = 1*(ALPHA / DIGIT / "-" / ".")
    identifier       = ["DocumentRef-"idstring":"]idstring
    simple           = identifier ["+"]
    primary          = simple / "(" or-expression ")"
    with-expression  = primary ["WITH" identifier]
    and-expression   = with-expression *("AND" with-expression)
    or-expression    = and-expression *("OR" and-expression)

Operator precedence (tightest to loosest)::

    +  >  WITH  >  AND  >  OR

``AND`` and ``OR`` are left-associative. ``WITH`` attaches one exception
to a license or to a parenthesized clause: ``(MIT OR Apache-2.0) WITH
LLVM-exception`` is accepted, while ``A WITH B WITH C`` and
``A WITH (B OR C)`` are errors. Operators are accepted all-upper or
all-lower.

Identifiers are resolved against a :class:`~licensekit.catalog.LicenseCatalog`:

- a catalog license becomes a :class:`~licensekit.expression.SimpleLicense`,
- anything else becomes a :class:`~licensekit.expression.LicenseRef`
  (unless a stricter :class:`Strictness` is requested),
- the right operand of ``WITH`` becomes a
  :class:`~licensekit.expression.LicenseException`.

A trailing ``+`` is the legacy or-later marker and is only accepted on
deprecated catalog licenses (``GPL-2.0+``); current ids spell it out
(``GPL-2.0-or-later``).

A failed parse must never be read as "no license": callers should
treat :class:`~licensekit.errors.ParseError` as "needs review".
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass

from licensekit.catalog import LicenseCatalog, default_catalog
from licensekit.errors import ParseError
from licensekit.expression import (
    Compound,
    Expression,
    LicenseException,
    LicenseRef,
    Operator,
    SimpleLicense,
    exception_ids,
    to_expression,
)
from licensekit.logging import get_logger

__all__ = [
    'Strictness',
    'parse',
]

log = get_logger('licensekit.parser')


class Strictness(enum.Enum):
    """How much of the identifier space :func:`parse` accepts.

    Attributes:
        ALLOW_ANY: Unknown identifiers become ``LicenseRef`` leaves.
        ALLOW_DEPRECATED: Unknown identifiers must carry an explicit
            ``LicenseRef-``/``AdditionRef-``/``DocumentRef-`` prefix;
            deprecated catalog ids are accepted.
        ALLOW_CURRENT: As ``ALLOW_DEPRECATED``, and deprecated catalog
            ids are rejected too.
    """

    ALLOW_ANY = 'allow-any'
    ALLOW_DEPRECATED = 'allow-deprecated'
    ALLOW_CURRENT = 'allow-current'


_REF_PREFIXES = ('LicenseRef-', 'AdditionRef-', 'DocumentRef-')

# A keyword only counts when it is not the start of a longer identifier,
# so "ORT" or "ANDROID-1.0" stay identifiers.
_NOT_ID = r'(?![A-Za-z0-9.\-+:])'

_TOKEN_RE = re.compile(
    rf"""
    (?:
        (AND|and){_NOT_ID}          # group 1: AND operator
      | (OR|or){_NOT_ID}            # group 2: OR operator
      | (WITH|with){_NOT_ID}        # group 3: WITH operator
      | (\()                        # group 4: left paren
      | (\))                        # group 5: right paren
      | (                           # group 6: identifier
          (?:DocumentRef-[A-Za-z0-9.\-]+:)?
          [A-Za-z0-9.\-]+
        )
        (\+)?                       # group 7: legacy or-later marker
    )
    """,
    re.VERBOSE,
)

_TOK_AND = 'AND'
_TOK_OR = 'OR'
_TOK_WITH = 'WITH'
_TOK_LPAREN = '('
_TOK_RPAREN = ')'
_TOK_ID = 'ID'
_TOK_EOF = 'EOF'

_OPERATORS = {
    _TOK_AND: Operator.AND,
    _TOK_OR: Operator.OR,
    _TOK_WITH: Operator.WITH,
}


@dataclass
class _Token:
    kind: str
    value: str
    or_later: bool
    pos: int

    def describe(self) -> str:
        if self.kind == _TOK_EOF:
            return 'end of expression'
        if self.kind == _TOK_ID:
            return f'identifier {self.value!r}'
        return repr(self.value)


def _tokenize(expr: str) -> list[_Token]:
    """Tokenize a license expression string."""
    tokens: list[_Token] = []
    pos = 0
    while pos < len(expr):
        if expr[pos].isspace():
            pos += 1
            continue
        m = _TOKEN_RE.match(expr, pos)
        if m is None:
            raise ParseError(expr, pos, f'unexpected character {expr[pos]!r}')
        if m.group(1):
            tokens.append(_Token(_TOK_AND, 'AND', False, m.start(1)))
        elif m.group(2):
            tokens.append(_Token(_TOK_OR, 'OR', False, m.start(2)))
        elif m.group(3):
            tokens.append(_Token(_TOK_WITH, 'WITH', False, m.start(3)))
        elif m.group(4):
            tokens.append(_Token(_TOK_LPAREN, '(', False, m.start(4)))
        elif m.group(5):
            tokens.append(_Token(_TOK_RPAREN, ')', False, m.start(5)))
        else:
            tokens.append(_Token(_TOK_ID, m.group(6), m.group(7) is not None, m.start(6)))
        pos = m.end()
    tokens.append(_Token(_TOK_EOF, '', False, len(expr)))
    return tokens


class _Parser:
    """Recursive descent parser over a token list."""

    def __init__(
        self,
        expr: str,
        tokens: list[_Token],
        catalog: LicenseCatalog,
        strictness: Strictness,
    ) -> None:
        self._expr = expr
        self._tokens = tokens
        self._pos = 0
        self._catalog = catalog
        self._strictness = strictness

    def _peek(self) -> _Token:
        return self._tokens[self._pos]

    def _advance(self) -> _Token:
        tok = self._tokens[self._pos]
        self._pos += 1
        return tok

    def _error(self, tok: _Token, detail: str) -> ParseError:
        return ParseError(self._expr, tok.pos, detail)

    def parse(self) -> Expression:
        result = self._parse_or_expr()
        tok = self._peek()
        if tok.kind == _TOK_RPAREN:
            raise self._error(tok, 'unbalanced parentheses: unexpected ")"')
        if tok.kind != _TOK_EOF:
            raise self._error(tok, f'expected an operator, got {tok.describe()}')
        return result

    def _take_operator(self) -> _Token:
        """Consume an operator and make sure a right operand follows."""
        op = self._advance()
        nxt = self._peek()
        if nxt.kind not in (_TOK_ID, _TOK_LPAREN):
            raise self._error(nxt, f'missing right operand for {op.value}, got {nxt.describe()}')
        return op

    # or_expr = and_expr ("OR" and_expr)*
    def _parse_or_expr(self) -> Expression:
        left = self._parse_and_expr()
        while self._peek().kind == _TOK_OR:
            self._take_operator()
            left = Compound(left, Operator.OR, self._parse_and_expr())
        return left

    # and_expr = with_expr ("AND" with_expr)*
    def _parse_and_expr(self) -> Expression:
        left = self._parse_with_expr()
        while self._peek().kind == _TOK_AND:
            self._take_operator()
            left = Compound(left, Operator.AND, self._parse_with_expr())
        return left

    # with_expr = primary ("WITH" identifier)?
    def _parse_with_expr(self) -> Expression:
        node = self._parse_primary()
        if self._peek().kind != _TOK_WITH:
            return node
        with_tok = self._take_operator()
        if exception_ids(node):
            raise self._error(with_tok, 'WITH cannot be chained; the clause on its left already has an exception')
        exc_tok = self._peek()
        if exc_tok.kind != _TOK_ID:
            raise self._error(exc_tok, f'WITH requires a single exception identifier on its right, got {exc_tok.describe()}')
        node = Compound(node, Operator.WITH, self._resolve_exception(self._advance()))
        nxt = self._peek()
        if nxt.kind == _TOK_WITH:
            raise self._error(nxt, 'WITH cannot be chained; only one exception may be attached')
        return node

    # primary = "(" or_expr ")" / identifier
    def _parse_primary(self) -> Expression:
        tok = self._peek()
        if tok.kind == _TOK_LPAREN:
            self._advance()
            if self._peek().kind == _TOK_RPAREN:
                raise self._error(self._peek(), 'empty parentheses')
            node = self._parse_or_expr()
            close = self._peek()
            if close.kind != _TOK_RPAREN:
                raise self._error(
                    close,
                    f'unbalanced parentheses: missing ")" for "(" at position {tok.pos}, got {close.describe()}',
                )
            self._advance()
            return node
        if tok.kind == _TOK_ID:
            return self._resolve_license(self._advance())
        if tok.kind in _OPERATORS:
            raise self._error(tok, f'operator {tok.value} in invalid position: missing left operand')
        if tok.kind == _TOK_RPAREN:
            raise self._error(tok, 'unbalanced parentheses: unexpected ")"')
        raise self._error(tok, 'unexpected end of expression: expected a license identifier or "("')

    def _resolve_license(self, tok: _Token) -> SimpleLicense | LicenseRef:
        value = tok.value
        if tok.or_later:
            return self._resolve_legacy_or_later(tok)
        if self._catalog.lookup_exception(value) is not None:
            raise self._error(tok, f'exception {value!r} used as a license; attach it with WITH')
        entry = self._catalog.lookup_license(value)
        if entry is not None:
            self._check_deprecated(tok, entry.deprecated)
            return to_expression(entry)  # type: ignore[return-value]
        self._check_unknown(tok)
        log.debug('unknown_license_identifier', identifier=value, position=tok.pos)
        return LicenseRef(value)

    def _resolve_legacy_or_later(self, tok: _Token) -> SimpleLicense:
        value = tok.value
        entry = self._catalog.lookup_license(f'{value}+')
        if entry is not None and entry.deprecated:
            self._check_deprecated(tok, True)
            return to_expression(entry)  # type: ignore[return-value]
        base = self._catalog.lookup_license(value)
        if base is not None and base.deprecated:
            self._check_deprecated(tok, True)
            return SimpleLicense(id=base.id, or_later=True, deprecated=True)
        raise ParseError(
            self._expr,
            tok.pos + len(value),
            f'"+" is only allowed on deprecated license identifiers, not on {value!r}',
        )

    def _resolve_exception(self, tok: _Token) -> LicenseException:
        value = tok.value
        if tok.or_later:
            raise ParseError(self._expr, tok.pos + len(value), f'exception {value!r} cannot carry "+"')
        if self._catalog.lookup_license(value) is not None:
            raise self._error(tok, f'WITH requires an exception, but {value!r} is a license')
        entry = self._catalog.lookup_exception(value)
        if entry is not None:
            self._check_deprecated(tok, entry.deprecated)
            return to_expression(entry)  # type: ignore[return-value]
        self._check_unknown(tok)
        log.debug('unknown_exception_identifier', identifier=value, position=tok.pos)
        return LicenseException(value)

    def _check_deprecated(self, tok: _Token, deprecated: bool) -> None:
        if not deprecated:
            return
        if self._strictness is Strictness.ALLOW_CURRENT:
            raise self._error(tok, f'deprecated identifier {tok.value!r} is not allowed')
        log.debug('deprecated_identifier', identifier=tok.value, position=tok.pos)

    def _check_unknown(self, tok: _Token) -> None:
        if self._strictness is Strictness.ALLOW_ANY:
            return
        if tok.value.startswith(_REF_PREFIXES):
            return
        raise self._error(tok, f'unknown identifier {tok.value!r}; use a "LicenseRef-" prefix for custom licenses')


def parse(
    expression: str,
    *,
    catalog: LicenseCatalog | None = None,
    strictness: Strictness = Strictness.ALLOW_ANY,
) -> Expression:
    """Parse a license expression into an AST.

    Args:
        expression: A license expression string
            (e.g. ``"MIT AND (Apache-2.0 OR GPL-2.0-or-later)"``).
        catalog: Catalog used to resolve identifiers. Defaults to
            :func:`~licensekit.catalog.default_catalog`.
        strictness: Which identifiers are accepted; see
            :class:`Strictness`.

    Returns:
        The root node of the parsed AST.

    Raises:
        ParseError: If the expression is empty, malformed, or violates
            *strictness*. The error carries the offending position.

    Examples::

        >>> parse('MIT')
        SimpleLicense(id='MIT', or_later=False, deprecated=False)

        >>> parse('GPL-2.0+')
        SimpleLicense(id='GPL-2.0', or_later=True, deprecated=True)

        >>> str(parse('MIT OR Apache-2.0 AND BSD-3-Clause'))
        'MIT OR Apache-2.0 AND BSD-3-Clause'
    """
    if not expression.strip():
        raise ParseError(expression, 0, 'empty expression')
    tokens = _tokenize(expression)
    parser = _Parser(expression, tokens, catalog or default_catalog(), strictness)
    return parser.parse()
