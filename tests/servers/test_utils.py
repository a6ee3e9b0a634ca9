# SPDX-FileCopyrightText: 2019-2025 Contributors to scanbox
#
# SPDX-License-Identifier: GPL-3.0-or-later

import pytest

from scanbox.servers.utils import extract_script_array
from scanbox.servers.utils import get_page_id
from scanbox.servers.utils import get_servers_list

SCRIPT = r'''
    var chapterId = 1234;
    var cdns = ["\/\/img-r1.2xstorage.com\/", "//img-r2.2xstorage.com/"];
    var backupImage = ['https://backup.test/'];
    var chapterImages = ["manga\/a\/chapter-1\/1.webp","manga/a/chapter-1/2.webp",];
'''


def test_extract_script_array():
    assert extract_script_array('cdns = ["//a.test","//b.test/"]', 'cdns') == ['//a.test', '//b.test']

    assert extract_script_array(SCRIPT, 'cdns') == ['//img-r1.2xstorage.com', '//img-r2.2xstorage.com']
    assert extract_script_array(SCRIPT, 'backupImage') == ['https://backup.test']
    assert extract_script_array(SCRIPT, 'chapterImages') == [
        'manga/a/chapter-1/1.webp',
        'manga/a/chapter-1/2.webp',
    ]


def test_extract_script_array_first_assignment_wins():
    script = 'cdns=["//first.test"]; cdns = ["//second.test"];'

    assert extract_script_array(script, 'cdns') == ['//first.test']


def test_extract_script_array_matches_whole_name():
    script = 'var backup_cdns = ["//x.test"]; var $cdns = ["//y.test"]; var cdns = ["//a.test"];'

    assert extract_script_array(script, 'cdns') == ['//a.test']
    assert extract_script_array('window.cdns = ["//a.test"]', 'cdns') == ['//a.test']


def test_extract_script_array_strips_a_single_trailing_slash():
    assert extract_script_array('images = ["/a//"]', 'images') == ['/a/']


@pytest.mark.parametrize('script, name', [
    (SCRIPT, 'missing'),
    ('cdns = []', 'cdns'),
    ('cdns = ["//a.test"', 'cdns'),
    ('cdns = "//a.test"', 'cdns'),
    ('', 'cdns'),
    (None, 'cdns'),
    (b'cdns = ["//a.test"]', 'cdns'),
    (SCRIPT, ''),
    (SCRIPT, None),
    ('x = [(', '(['),
])
def test_extract_script_array_no_match(script, name):
    assert extract_script_array(script, name) == []


def test_get_page_id():
    page_id = get_page_id('https://m1.cdn/1.jpg')

    assert page_id == get_page_id('https://m1.cdn/1.jpg')
    assert page_id != get_page_id('https://m2.cdn/1.jpg')
    assert len(page_id) == 16


def test_get_servers_list():
    servers = get_servers_list()
    ids = [server['id'] for server in servers]

    assert 'manganato' in ids
    assert 'mangakakalot' in ids
    assert len(ids) == len(set(ids))

    manganato = next(server for server in servers if server['id'] == 'manganato')
    assert manganato['class_name'] == 'Manganato'
    assert getattr(manganato['module'], manganato['class_name']).__name__ == 'Manganato'
