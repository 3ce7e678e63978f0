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

"""Tests for licensekit.logging module."""

from __future__ import annotations

import logging

from licensekit.logging import (
    MAX_FIELD_LENGTH,
    configure_logging,
    get_logger,
    truncate_long_values,
)


class TestConfigureLogging:
    """Tests for configure_logging()."""

    def test_default_level_is_info(self) -> None:
        """Default logging level should be INFO."""
        configure_logging()
        assert logging.root.level == logging.INFO

    def test_verbose_sets_debug(self) -> None:
        """Verbose flag should set DEBUG level."""
        configure_logging(verbose=True)
        assert logging.root.level == logging.DEBUG

    def test_quiet_sets_warning(self) -> None:
        """Quiet flag should set WARNING level."""
        configure_logging(quiet=True)
        assert logging.root.level == logging.WARNING

    def test_quiet_wins_over_verbose(self) -> None:
        """Quiet should take precedence over verbose."""
        configure_logging(verbose=True, quiet=True)
        assert logging.root.level == logging.WARNING

    def test_json_log_does_not_crash(self) -> None:
        """JSON log mode should configure without errors."""
        configure_logging(json_log=True)
        log = get_logger()
        log.info('test_json', key='value')

    def test_idempotent(self) -> None:
        """Calling configure_logging twice should not crash."""
        configure_logging()
        configure_logging(verbose=True)
        assert logging.root.level == logging.DEBUG


class TestGetLogger:
    """Tests for get_logger()."""

    def test_returns_bound_logger(self) -> None:
        """get_logger should return a usable logger."""
        configure_logging()
        log = get_logger('licensekit.test')
        assert log is not None
        log.debug('probe', identifier='MIT')


class TestTruncateLongValues:
    """Tests for the truncate_long_values processor."""

    def test_short_values_untouched(self) -> None:
        """Short strings and non-strings pass through."""
        event = {'event': 'parsed', 'expression': 'MIT OR Apache-2.0', 'count': 3}
        assert truncate_long_values(None, 'info', event) == event

    def test_long_value_truncated(self) -> None:
        """Strings over the limit are cut and marked."""
        long_text = 'MIT AND ' * 100
        result = truncate_long_values(None, 'info', {'event': 'x', 'expression': long_text})
        assert len(result['expression']) < len(long_text)
        assert result['expression'].startswith(long_text[:MAX_FIELD_LENGTH])
        assert result['expression'].endswith('[truncated]')

    def test_event_never_truncated(self) -> None:
        """The event name itself is left alone."""
        name = 'e' * (MAX_FIELD_LENGTH + 10)
        assert truncate_long_values(None, 'info', {'event': name})['event'] == name
