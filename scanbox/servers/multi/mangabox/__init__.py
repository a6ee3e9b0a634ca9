# SPDX-FileCopyrightText: 2019-2025 Valéry Febvre
# SPDX-License-Identifier: GPL-3.0-or-later

# Supported servers:
# Mangakakalot [EN]
# MangaNato [EN]

import logging
import re
from urllib.parse import urljoin
from urllib.parse import urlsplit

from bs4 import BeautifulSoup
import requests
from urllib3.util.retry import Retry

from scanbox.servers import Server
from scanbox.servers import USER_AGENT
from scanbox.servers.exceptions import NotFoundError
from scanbox.servers.mirrors import MirrorsAdapter
from scanbox.servers.mirrors import MirrorsRegistry
from scanbox.servers.utils import extract_script_array
from scanbox.servers.utils import get_page_id
from scanbox.utils import get_buffer_mime_type

logger = logging.getLogger(__name__)

# Collapse duplicate slashes, except those following scheme
RE_DUPLICATE_SLASHES = re.compile(r'(?<!:)/{2,}')


class Mangabox(Server):
    base_url: str = None
    manga_url: str = None
    chapter_url: str = None
    other_domain: str = None  # Domain used as fallback when chapter page has no images

    cdns_array_names: tuple = ('cdns', 'backupImage')
    images_array_name: str = 'chapterImages'
    image_src_attrs: list = ['data-src', 'src']
    pages_selector: str = 'div#vungdoc img, div.container-chapter-reader img'

    __mirrors = {}  # to cache mirrors registries, one per server

    def __init__(self):
        if self.session is None:
            self.session = requests.Session()
            self.session.headers.update({'User-Agent': USER_AGENT})

            retry = Retry(total=3, read=3, connect=3, allowed_methods=['GET'], backoff_factor=0.3)
            adapter = MirrorsAdapter(self.mirrors, max_retries=retry)
            self.session.mount('http://', adapter)
            self.session.mount('https://', adapter)

    @property
    def mirrors(self):
        return Mangabox.__mirrors.setdefault(self.id, MirrorsRegistry())

    def get_manga_chapter_data(self, manga_slug, manga_name, chapter_slug, chapter_url):
        """
        Returns manga chapter data

        Pages images URLs are built using the images paths and the CDNs found in chapter HTML page scripts.
        Otherwise, they are scraped from the <img> elements of chapter HTML page.
        """
        url = chapter_url or self.chapter_url.format(manga_slug, chapter_slug)

        soup = self.get_chapter_soup(url)
        if soup is None:
            return None

        scripts = '\n'.join(element.string for element in soup.find_all('script') if element.string)

        cdns = []
        for name in self.cdns_array_names:
            cdns += extract_script_array(scripts, name)
        images = extract_script_array(scripts, self.images_array_name)

        if cdns:
            self.mirrors.add_all(cdns)

        if cdns and images:
            cdn = cdns[0]
            if cdn.startswith('//'):
                cdn = f'https:{cdn}'  # noqa: E231
            images = [self.build_image_url(cdn, path) for path in images]
        else:
            images = self.get_chapter_soup_images(soup, url)

            if not images and self.other_domain:
                other_url = url.replace(urlsplit(url).netloc, self.other_domain, 1)
                logger.debug('No images found in chapter page, retry with %s', other_url)

                if (soup := self.get_chapter_soup(other_url)) is not None:
                    images = self.get_chapter_soup_images(soup, other_url)

        if not images:
            raise NotFoundError()

        data = dict(
            pages=[],
        )
        for index, image in enumerate(images):
            data['pages'].append(dict(
                slug=None,  # slug can't be used to forge image URL
                image=image,
                index=index + 1,
                id=get_page_id(image),
            ))

        return data

    @staticmethod
    def build_image_url(cdn, path):
        # Duplicate slashes are collapsed in path only, query string is kept as is
        path, sep, query = path.partition('?')

        return RE_DUPLICATE_SLASHES.sub('/', f'{cdn.rstrip("/")}/{path}') + sep + query

    def get_chapter_soup(self, url):
        r = self.session_get(url)
        if r.status_code != 200:
            return None

        mime_type = get_buffer_mime_type(r.content)
        if mime_type != 'text/html':
            return None

        soup = BeautifulSoup(r.text, 'lxml')

        if soup.body and soup.body.text.strip().startswith('REDIRECT :'):
            # Source URL has changed
            raise NotFoundError()

        return soup

    def get_chapter_soup_images(self, soup, url):
        images = []
        for img_element in soup.select(self.pages_selector):
            image = None
            for attr in self.image_src_attrs:
                if image := img_element.get(attr, '').strip():
                    break
            if not image:
                continue

            if image.startswith('//'):
                image = f'https:{image}'  # noqa: E231

            images.append(urljoin(url, image))

        return images

    def get_manga_chapter_page_image(self, manga_slug, manga_name, chapter_slug, page):
        """
        Returns chapter page scan (image) content

        Request is transparently replayed on the other known CDNs if it fails.
        """
        if self.headers_images is not None:
            headers = self.headers_images
        else:
            headers = {
                'Accept': 'image/avif,image/webp,image/png,image/svg+xml,image/*;q=0.8,*/*;q=0.5',
                'Referer': f'{self.base_url}/',
            }

        r = self.session_get(page['image'], headers=headers)
        if r.status_code != 200:
            return None

        mime_type = get_buffer_mime_type(r.content)
        if not mime_type.startswith('image'):
            return None

        name = page['image'].split('?')[0].split('/')[-1]
        if page.get('index'):
            name = f'{page["index"]:04d}.{mime_type.split("/")[-1]}'  # noqa: E231

        return dict(
            buffer=r.content,
            mime_type=mime_type,
            name=name,
        )

    def get_manga_url(self, slug, url):
        """
        Returns manga absolute URL
        """
        return url or self.manga_url.format(slug)
