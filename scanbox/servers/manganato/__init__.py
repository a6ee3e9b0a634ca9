# SPDX-FileCopyrightText: 2019-2025 Valéry Febvre
# SPDX-License-Identifier: GPL-3.0-or-later

from scanbox.servers.multi.mangabox import Mangabox

# NOTE: www.nelomanga.com and www.manganato.gg are clones (same content)


class Manganato(Mangabox):
    id = 'manganato'
    name = 'MangaNato'
    lang = 'en'

    base_url = 'https://www.natomanga.com'
    manga_url = base_url + '/manga/{0}'
    chapter_url = base_url + '/manga/{0}/chapter-{1}'
    other_domain = 'www.nelomanga.com'

    cdns_array_names = ('cdns', )
    pages_selector = '.container-chapter-reader > img'
