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

"""Exception types raised by licensekit.

A :class:`ParseError` comes from external text (scanner output, manifests)
and means "needs review"; a :class:`ConstructionError` is a bug at the
call site.

Unknown license identifiers are **not** errors; they become
:class:`~licensekit.expression.LicenseRef` leaves.
"""

from __future__ import annotations

__all__ = [
    'CatalogDataError',
    'ConfigError',
    'ConstructionError',
    'LicenseKitError',
    'ParseError',
]


class LicenseKitError(Exception):
    """Base class for all licensekit errors."""


class ParseError(LicenseKitError, ValueError):
    """Raised when a license expression cannot be parsed.

    Attributes:
        expression: The original expression string.
        position: Character offset where the error was detected.
        detail: Human-readable description of the problem.
    """

    def __init__(self, expression: str, position: int, detail: str) -> None:
        """Initialize with expression text, error position, and detail message."""
        self.expression = expression
        self.position = position
        self.detail = detail
        marker = ' ' * position + '^'
        super().__init__(f'license expression parse error at position {position}: {detail}\n  {expression}\n  {marker}')


class ConstructionError(LicenseKitError, ValueError):
    """Raised when an expression node is built with invalid operands.

    This signals a programming error in the caller (e.g. attaching an
    exception to a compound expression), never malformed input text.
    """


class CatalogDataError(LicenseKitError):
    """Raised when license catalog TOML data fails validation.

    Attributes:
        errors: List of human-readable error strings.
    """

    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        bullet_list = '\n'.join(f'  - {e}' for e in errors)
        super().__init__(f'License catalog has {len(errors)} validation error(s):\n{bullet_list}')


class ConfigError(LicenseKitError):
    """Raised when a licensekit configuration file is invalid.

    Attributes:
        path: The offending configuration file, if known.
    """

    def __init__(self, message: str, path: object = None) -> None:
        self.path = path
        prefix = f'{path}: ' if path is not None else ''
        super().__init__(f'{prefix}{message}')
