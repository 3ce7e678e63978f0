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

"""Structured logging for licensekit.

Configures `structlog <https://www.structlog.org/>`_ with two output modes:

- **Console** (default): human-readable output, with exceptions
  rendered through ``rich`` tracebacks.
- **JSON** (``json_log=True``): one JSON object per line, for
  ingestion by compliance pipelines.

Both modes write to stderr. licensekit is a library, so nothing is
configured on import; applications call :func:`configure_logging`
once at startup. Without it, structlog's defaults apply.

Usage::

    from licensekit.logging import configure_logging, get_logger

    configure_logging(verbose=True)
    log = get_logger('licensekit.parser')
    log.debug('unknown_license_identifier', identifier='LicenseRef-foo')
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

#: Longest string value kept verbatim in a log event. Scanner findings
#: occasionally carry whole license texts in the expression field.
MAX_FIELD_LENGTH = 200

_TRUNCATED_SUFFIX = '...[truncated]'


def configure_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    json_log: bool = False,
) -> None:
    """Configure structlog for licensekit.

    Should be called once at startup, before any logging calls.

    Args:
        verbose: Enable debug-level output (unknown and deprecated
            identifiers are reported at this level).
        quiet: Suppress info-level output (only warnings and errors).
        json_log: Use JSON output instead of console output.
    """
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logging.basicConfig(
        format='%(message)s',
        stream=sys.stderr,
        level=level,
        force=True,
    )

    shared_processors: list[structlog.types.Processor] = [  # type: ignore[assignment]
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt='iso'),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        truncate_long_values,
    ]

    if json_log:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=sys.stderr.isatty(),
            exception_formatter=structlog.dev.rich_traceback,
        )

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )
    for handler in logging.root.handlers:
        handler.setFormatter(formatter)


def get_logger(name: str = 'licensekit') -> structlog.stdlib.BoundLogger:
    """Return a bound structlog logger.

    Args:
        name: Logger name, used for filtering and identification.

    Returns:
        A :class:`structlog.stdlib.BoundLogger` instance.
    """
    return structlog.get_logger(name)


def _truncate(value: object) -> object:
    if isinstance(value, str) and len(value) > MAX_FIELD_LENGTH:
        return value[:MAX_FIELD_LENGTH] + _TRUNCATED_SUFFIX
    return value


def truncate_long_values(
    logger: Any,  # noqa: ANN401
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Structlog processor: shorten over-long string fields.

    The ``event`` key itself is left alone.
    """
    return {k: v if k == 'event' else _truncate(v) for k, v in event_dict.items()}


__all__ = [
    'MAX_FIELD_LENGTH',
    'configure_logging',
    'get_logger',
    'truncate_long_values',
]
