import re

from ..extension import Extension, append_to, base_url
from ..links import Link, Property
from ..resource import Resource

_VARIABLE_NAME = re.compile(r'^[A-Za-z0-9_]+(\.[A-Za-z0-9_]+)*$')


def _items(obj, key):
    if isinstance(obj, dict) and isinstance(obj.get(key), list):
        return [item for item in obj[key] if isinstance(item, dict)]
    return []


def _link(obj, base, rel=None, href=None, templated=False):
    rel = rel or obj.get('rel')
    href = href or obj.get('href')
    if not isinstance(rel, str) or not isinstance(href, str):
        return None
    return Link(rel, href, templated=templated, title=obj.get('prompt'), name=obj.get('name'), base=base)


def query_template(href, data):
    """
    Returns ``href`` extended with an RFC 6570 form-style query expression for the names in ``data``, e.g.
    ``/posts{?q}``, along with whether any expression was added.
    """
    names = [d['name'] for d in data if isinstance(d.get('name'), str) and _VARIABLE_NAME.match(d['name'])]
    if not names:
        return href, False
    operator = '&' if '?' in href else '?'
    return '{}{{{}{}}}'.format(href, operator, ','.join(names)), True


class CollectionJsonItemExtension(Extension):
    """
    A single item of a Collection+JSON collection. Items are never selected by content negotiation; they are parsed
    by this extension when the enclosing collection is parsed.
    """

    def link_parser(self, document, headers, request, context):
        links = {}
        if not isinstance(document, dict):
            return links

        base = base_url(request)
        if isinstance(document.get('href'), str):
            append_to(links, 'self', Link('self', document['href'], base=base))

        for obj in _items(document, 'links'):
            append_to(links, obj.get('rel'), _link(obj, base))
        return links

    def data_parser(self, document, headers):
        return [Property(d['name'], d.get('value')) for d in _items(document, 'data') if isinstance(d.get('name'), str)]


class CollectionJsonExtension(CollectionJsonItemExtension):
    """
    Collection+JSON (``application/vnd.collection+json``).

    The collection ``href`` is the ``self`` link. Queries are exposed as templated links, so that
    ``resource.follow('search', params={'q': 'potion'})`` expands to ``/posts?q=potion``. Items are embedded under the
    ``item`` relation.
    """
    standard_media_types = ('application/vnd.collection+json',)

    item_rel = 'item'

    def __init__(self, media_types=None):
        super(CollectionJsonExtension, self).__init__(media_types)
        self.item_extension = CollectionJsonItemExtension()

    def _collection(self, document):
        if isinstance(document, dict) and isinstance(document.get('collection'), dict):
            return document['collection']
        return {}

    def link_parser(self, document, headers, request, context):
        collection = self._collection(document)
        links = super(CollectionJsonExtension, self).link_parser(collection, headers, request, context)

        for query in _items(collection, 'queries'):
            if not isinstance(query.get('href'), str):
                continue
            href, templated = query_template(query['href'], _items(query, 'data'))
            append_to(links, query.get('rel'), _link(query, base_url(request), href=href, templated=templated))
        return links

    def data_parser(self, document, headers):
        return []

    def embedded_parser(self, document, headers, context, request=None):
        embedded = {}
        for item in _items(self._collection(document), 'items'):
            append_to(embedded, self.item_rel, Resource.from_embedded(item,
                                                                      headers,
                                                                      context,
                                                                      extension=self.item_extension,
                                                                      request=request))
        return embedded
