import json
import logging

from requests.utils import parse_header_links

from .links import Link, Property
from .utils import media_type, to_headers

logger = logging.getLogger(__name__)


def append_to(mapping, key, value):
    if value is not None:
        mapping.setdefault(key, []).append(value)
    return mapping


def base_url(request):
    return getattr(request, 'url', None)


class Extension(object):
    """
    The base class for all hypermedia format adapters. An extension is created once per client configuration and is
    stateless; everything a parser needs is passed in explicitly.

    A :class:`Context` asks each of its extensions in turn whether it :meth:`applies` to a response and uses the first
    that does to parse the response document.

    Subclasses list the media types they recognize in :attr:`standard_media_types` and override any of the four
    parsers. The defaults return empty results, so an extension for a format without e.g. embedded resources only
    needs to implement what the format has.

    :param list media_types: additional media types to recognize, such as vendor types
        (``application/vnd.co.format+json``)

    .. attribute:: media_types

        Standard media types followed by the additional media types, in order.
    """
    standard_media_types = ()

    def __init__(self, media_types=None):
        self.media_types = list(self.standard_media_types) + list(media_types or ())

    def applies(self, request, headers, status_code):
        """
        :param request: the :class:`Request` the response answers, or ``None``
        :param headers: response headers
        :param int status_code: response status code
        :return: ``True`` if this extension can parse the response
        """
        if status_code == 204:
            return False
        return media_type(headers) in (m.lower() for m in self.media_types)

    def load(self, body):
        """
        Decodes a response body into a document. Bodies that have already been decoded are passed through; bodies
        that cannot be decoded are logged and treated as empty.
        """
        if isinstance(body, bytes):
            try:
                body = body.decode('utf-8')
            except UnicodeDecodeError:
                logger.warning('Response body is not valid UTF-8; treating it as empty')
                return None

        if not isinstance(body, str):
            return body

        if not body.strip():
            return None

        try:
            return json.loads(body)
        except ValueError as e:
            logger.warning('Response body is not valid JSON (%s); treating it as empty', e)
            return None

    def link_parser(self, document, headers, request, context):
        """
        :return: a dictionary mapping relation names to lists of :class:`Link` objects
        """
        return {}

    def curie_prefix_parser(self, document, headers, context):
        """
        :return: a dictionary mapping curie prefixes to :class:`CurieTemplate` objects
        """
        return {}

    def data_parser(self, document, headers):
        """
        :return: a list of :class:`Property` entries
        """
        return []

    def embedded_parser(self, document, headers, context, request=None):
        """
        :param request: request of the enclosing resource; embedded resources use it to resolve relative links
        :return: a dictionary mapping relation names to lists of :class:`Resource` objects
        """
        return {}

    def __repr__(self):
        return '{}({})'.format(self.__class__.__name__, repr(self.media_types))


class LinkHeaderMixin(object):
    """
    Parses RFC 5988 ``Link`` response headers, e.g. ``</person?page=2&per_page=20>; rel="next"``.
    """

    def header_links(self, headers, request=None):
        links = {}
        values = to_headers(headers).getlist('Link')
        if not values:
            return links

        for item in parse_header_links(', '.join(values)):
            href = item.get('url')
            if not href:
                continue
            for rel in item.get('rel', '').split():
                append_to(links, rel, Link(rel,
                                           href,
                                           title=item.get('title'),
                                           type=item.get('type'),
                                           hreflang=item.get('hreflang'),
                                           base=base_url(request)))
        return links


class JsonExtension(LinkHeaderMixin, Extension):
    """
    Plain JSON. Top-level object properties become data; links are only available through ``Link`` headers.
    """
    standard_media_types = ('application/json',)

    def link_parser(self, document, headers, request, context):
        return self.header_links(headers, request)

    def data_parser(self, document, headers):
        if not isinstance(document, dict):
            return []
        return [Property(name, value) for name, value in document.items()]
