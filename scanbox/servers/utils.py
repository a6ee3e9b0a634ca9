# SPDX-FileCopyrightText: 2019-2025 Valéry Febvre
# SPDX-License-Identifier: GPL-3.0-or-later

import hashlib
import importlib
import inspect
import logging
from operator import itemgetter
from pkgutil import iter_modules
import re

logger = logging.getLogger(__name__)


def extract_script_array(script, name):
    """
    Extracts the string values of a JavaScript array literal assigned to a variable

    Only the first `name = [...]` assignment found is considered.
    Values are trimmed, unquoted and unescaped (`\\/` => `/`). A single trailing slash is removed.

    :param script: A JavaScript code
    :type script: str

    :param name: The name of the variable
    :type name: str

    :return: The list of values, empty if variable is not found or array is malformed
    :rtype: list of str
    """
    if not isinstance(script, str) or not isinstance(name, str) or not name:
        return []

    matches = re.search(r'(?<![\w$]){0}\s*=\s*\[([^\]]+)\]'.format(re.escape(name)), script)
    if matches is None:
        return []

    values = []
    for value in matches.group(1).split(','):
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "'"):
            value = value[1:-1]
        value = value.replace('\\/', '/')
        if value.endswith('/'):
            value = value[:-1]

        if value:
            values.append(value)

    return values


def get_page_id(url):
    """Returns a stable ID for a page image URL"""
    return hashlib.sha256(url.encode('utf-8')).hexdigest()[:16]


def get_server_class_name_by_id(id):
    """
    Returns a server class name from its ID

    `id` must respect the following format: `name[_lang][:module_name]`
    """
    return id.split(':')[0].capitalize()


def get_servers_list(include_disabled=False, order_by=('lang', 'name')):
    servers = []
    for module in get_servers_modules():
        for _name, obj in dict(inspect.getmembers(module)).items():
            if not inspect.isclass(obj):
                continue
            if not hasattr(obj, 'id') or not hasattr(obj, 'name') or not hasattr(obj, 'lang'):
                continue
            if obj.__module__ != module.__name__:
                # Imported base class (multi-servers)
                continue

            if not include_disabled and obj.status == 'disabled':
                continue

            servers.append(dict(
                id=obj.id,
                name=obj.name,
                lang=obj.lang,
                is_nsfw=obj.is_nsfw,
                module=module,
                class_name=get_server_class_name_by_id(obj.id),
            ))

    return sorted(servers, key=itemgetter(*order_by))


def get_servers_modules(reload=False):
    def iter_namespace(ns_pkg):
        # Specifying the second argument (prefix) to iter_modules makes the
        # returned name an absolute name instead of a relative one. This allows
        # import_module to work without having to do additional modification to
        # the name.
        return iter_modules(ns_pkg.__path__, ns_pkg.__name__ + '.')

    import scanbox.servers

    modules = []
    for _finder, module_name, ispkg in iter_namespace(scanbox.servers):
        if not ispkg or module_name.endswith('.multi'):
            continue

        module = importlib.import_module(module_name)
        if reload:
            module = importlib.reload(module)
        modules.append(module)

    logger.info('Import {0} servers modules'.format(len(modules)))

    return modules
