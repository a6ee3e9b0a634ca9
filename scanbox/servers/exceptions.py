# SPDX-FileCopyrightText: 2019-2025 Valéry Febvre
# SPDX-License-Identifier: GPL-3.0-or-later

from gettext import gettext as _

import requests


class ServerException(Exception):
    def __init__(self, message):
        self.message = _('Error: {}').format(message)
        super().__init__(self.message)


class NotFoundError(ServerException):
    def __init__(self):
        super().__init__(_('No longer exists.'))


class MirrorsExhaustedError(requests.exceptions.ConnectionError):
    """Raised when a request failed on its own origin and on every known mirror"""

    def __init__(self, url, *args, **kwargs):
        self.url = url
        super().__init__(f'All mirrors attempts failed for {url}', *args, **kwargs)
