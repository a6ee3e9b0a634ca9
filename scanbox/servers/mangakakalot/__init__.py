# SPDX-FileCopyrightText: 2019-2025 Valéry Febvre
# SPDX-License-Identifier: GPL-3.0-or-later

from scanbox.servers.multi.mangabox import Mangabox


class Mangakakalot(Mangabox):
    id = 'mangakakalot'
    name = 'Mangakakalot'
    lang = 'en'

    base_url = 'https://www.mangakakalot.gg'
    manga_url = base_url + '/manga/{0}'
    chapter_url = base_url + '/manga/{0}/chapter-{1}'
