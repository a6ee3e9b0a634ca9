# SPDX-FileCopyrightText: 2019-2025 Contributors to scanbox
#
# SPDX-License-Identifier: GPL-3.0-or-later

import logging

from scanbox.servers.exceptions import MirrorsExhaustedError
from scanbox.servers.exceptions import NotFoundError
from scanbox.utils import log_error_traceback

logging.basicConfig(level=logging.DEBUG)


def test_log_error_traceback_network_errors():
    assert log_error_traceback(MirrorsExhaustedError('https://m1.cdn/1.jpg')) == 'No Internet connection, timeout or server down'


def test_log_error_traceback_server_errors():
    assert log_error_traceback(NotFoundError()) == 'Error: No longer exists.'


def test_log_error_traceback_other_errors():
    try:
        raise ValueError('boom')
    except ValueError as e:
        assert log_error_traceback(e) is None
