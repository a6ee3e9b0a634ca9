# SPDX-FileCopyrightText: 2019-2025 Valéry Febvre
# SPDX-License-Identifier: GPL-3.0-or-later

# Image mirrors (CDNs) failover
#
# Mangabox-family sites serve chapter images from several interchangeable CDNs.
# Their list is only known once a chapter page has been scraped (see `cdns` and
# `backupImage` arrays in inline scripts). Failed image requests are replayed
# against every known mirror and the mirror that served the last successful
# response becomes the preferred one.

from collections import OrderedDict
from enum import Enum
import logging
import threading
from urllib.parse import urlsplit
from urllib.parse import urlunsplit

import requests
from requests.adapters import HTTPAdapter

from scanbox.servers.exceptions import MirrorsExhaustedError

logger = logging.getLogger(__name__)

DEFAULT_PORTS = {
    'http': 80,
    'https': 443,
}


def get_base_url(url):
    """
    Returns the base URL (scheme, host and port) of an URL

    A protocol-relative URL (`//host/path`) is considered as HTTPS.
    Default ports are omitted.

    :param url: An absolute or protocol-relative URL
    :type url: str

    :return: The normalized base URL, `None` if URL has no host
    :rtype: str or None
    """
    if not isinstance(url, str):
        return None

    url = url.strip()
    if url.startswith('//'):
        url = f'https:{url}'  # noqa: E231

    try:
        parts = urlsplit(url)
        port = parts.port
    except ValueError:
        return None

    if not parts.scheme or not parts.hostname:
        return None

    scheme = parts.scheme.lower()
    base_url = f'{scheme}://{parts.hostname}'
    if port and port != DEFAULT_PORTS.get(scheme):
        base_url += f':{port}'  # noqa: E231

    return base_url


def replace_base_url(url, base_url):
    """
    Returns `url` with its scheme, host and port replaced by those of `base_url`

    Path, query and fragment are preserved.
    """
    parts = urlsplit(url)
    base_parts = urlsplit(get_base_url(base_url))

    return urlunsplit((base_parts.scheme, base_parts.netloc, parts.path, parts.query, parts.fragment))


class MirrorsRegistry:
    """Ordered set of mirrors base URLs, the first one being the preferred one

    Thread-safe: all mutations and snapshots are serialized by a single lock.
    Iterating over the registry iterates over a snapshot taken at the start of the iteration.
    """

    def __init__(self, mirrors=None):
        self.__lock = threading.Lock()
        self.__mirrors = OrderedDict()

        if mirrors:
            self.add_all(mirrors)

    def __contains__(self, mirror):
        base_url = get_base_url(mirror)
        with self.__lock:
            return base_url in self.__mirrors

    def __iter__(self):
        return iter(self.snapshot())

    def __len__(self):
        with self.__lock:
            return len(self.__mirrors)

    def __repr__(self):
        return '<MirrorsRegistry {0}>'.format(list(self.snapshot()))

    def add(self, mirror):
        """Appends a mirror if not already known

        :return: True if mirror has been added
        :rtype: bool
        """
        base_url = get_base_url(mirror)
        if base_url is None:
            logger.debug('Ignore invalid mirror: %s', mirror)
            return False

        with self.__lock:
            if base_url in self.__mirrors:
                return False

            self.__mirrors[base_url] = None

        return True

    def add_all(self, mirrors):
        """Appends unknown mirrors, input order is preserved"""
        added = []
        for mirror in mirrors:
            if self.add(mirror):
                added.append(mirror)

        return added

    def promote(self, mirror):
        """Moves a known mirror at first position

        :return: True if order has changed
        :rtype: bool
        """
        base_url = get_base_url(mirror)

        with self.__lock:
            if base_url not in self.__mirrors or next(iter(self.__mirrors)) == base_url:
                return False

            self.__mirrors.move_to_end(base_url, last=False)

        logger.debug('Promote mirror %s', base_url)
        return True

    def snapshot(self):
        with self.__lock:
            return tuple(self.__mirrors)


class FailoverState(Enum):
    BYPASS = 'bypass'
    PRIMARY_ATTEMPT = 'primary_attempt'
    MIRROR_SWEEP = 'mirror_sweep'
    SUCCESS = 'success'
    EXHAUSTED = 'exhausted'


class Failover:
    """Resolves a single request, falling back on mirrors if needed

    `send` is a callable which performs one attempt: it receives an URL and returns a response or raises.
    Only scheme, host and port are changed between attempts.

    States:
    - BYPASS: URL doesn't target a known mirror, response (or error) of a single attempt is returned as is
    - PRIMARY_ATTEMPT: request is sent as is
    - MIRROR_SWEEP: request is sent successively to each known mirror (snapshot order)
    - SUCCESS: mirror which served the response is promoted
    - EXHAUSTED: all attempts failed, `MirrorsExhaustedError` is raised
    """

    def __init__(self, mirrors, send):
        self.mirrors = mirrors
        self.send = send

        self.attempts = 0
        self.state = None

    def attempt(self, url):
        self.attempts += 1

        try:
            r = self.send(url)
        except (requests.exceptions.RequestException, OSError) as error:
            logger.debug('Attempt %d failed: %s: %s', self.attempts, url, error)
            return None

        if not r.ok:
            logger.debug('Attempt %d failed: %s: status code %s', self.attempts, url, r.status_code)
            if r.raw is not None:
                # Responses built without a transport have no raw stream to release
                r.close()
            return None

        return r

    def run(self, url):
        base_url = get_base_url(url)

        if base_url is None or len(self.mirrors) == 0 or base_url not in self.mirrors:
            self.state = FailoverState.BYPASS
            self.attempts += 1
            return self.send(url)

        self.state = FailoverState.PRIMARY_ATTEMPT
        r = self.attempt(url)
        if r is not None:
            return self.succeed(base_url, r)

        self.state = FailoverState.MIRROR_SWEEP
        for mirror in self.mirrors.snapshot():
            r = self.attempt(replace_base_url(url, mirror))
            if r is not None:
                return self.succeed(mirror, r)

        self.state = FailoverState.EXHAUSTED
        logger.warning('All mirrors failed for %s (%d attempts)', url, self.attempts)
        raise MirrorsExhaustedError(url)

    def succeed(self, mirror, r):
        self.state = FailoverState.SUCCESS
        self.mirrors.promote(mirror)

        return r


class MirrorsAdapter(HTTPAdapter):
    """Transport adapter which replays failed requests against known mirrors

    Must be mounted on a session for `http://` and `https://` prefixes.
    Requests targeting unknown hosts are sent unmodified.
    """

    def __init__(self, mirrors, **kwargs):
        self.mirrors = mirrors
        super().__init__(**kwargs)

    def send(self, request, **kwargs):
        def send_to(url):
            if url == request.url:
                return super(MirrorsAdapter, self).send(request, **kwargs)

            # Headers are replayed as is, Cookie header of the original host included
            mirror_request = request.copy()
            mirror_request.url = url

            return super(MirrorsAdapter, self).send(mirror_request, **kwargs)

        failover = Failover(self.mirrors, send_to)
        try:
            return failover.run(request.url)
        except MirrorsExhaustedError as error:
            error.request = request
            raise
