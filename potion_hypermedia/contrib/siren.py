from ..extension import Extension, append_to, base_url
from ..links import Link, Property
from ..resource import Resource
from ..utils import ensure_list
from .collection_json import query_template


class SirenExtension(Extension):
    """
    Siren (``application/vnd.siren+json``).

    Every link and sub-entity carries a list of relations. Sub-entities that are embedded *links* (they have an
    ``href``) are exposed as links; embedded *representations* become embedded resources. ``GET`` actions are
    exposed as links named after the action, templated with the action fields as query parameters.
    """
    standard_media_types = ('application/vnd.siren+json',)

    def _items(self, document, key):
        if isinstance(document, dict) and isinstance(document.get(key), list):
            return [item for item in document[key] if isinstance(item, dict)]
        return []

    def _rels(self, obj):
        return [rel for rel in ensure_list(obj.get('rel')) if isinstance(rel, str)]

    def _is_embedded_link(self, entity):
        return isinstance(entity.get('href'), str)

    def link_parser(self, document, headers, request, context):
        links = {}
        entity_links = [entity for entity in self._items(document, 'entities') if self._is_embedded_link(entity)]

        for obj in self._items(document, 'links') + entity_links:
            for rel in self._rels(obj):
                append_to(links, rel, Link.from_object(rel, obj, base=base_url(request), templated=False))

        for action in self._items(document, 'actions'):
            append_to(links, action.get('name'), self._action_link(action, base_url(request)))
        return links

    def _action_link(self, action, base):
        name, href = action.get('name'), action.get('href')
        if not isinstance(name, str) or not isinstance(href, str):
            return None
        if str(action.get('method') or 'GET').upper() != 'GET':
            return None

        href, templated = query_template(href, self._items(action, 'fields'))
        return Link(name, href, templated=templated, title=action.get('title'), name=name, base=base)

    def data_parser(self, document, headers):
        if not isinstance(document, dict) or not isinstance(document.get('properties'), dict):
            return []
        return [Property(name, value) for name, value in document['properties'].items()]

    def embedded_parser(self, document, headers, context, request=None):
        embedded = {}
        for entity in self._items(document, 'entities'):
            if self._is_embedded_link(entity):
                continue

            resource = Resource.from_embedded(entity, headers, context, extension=self, request=request)
            for rel in self._rels(entity):
                append_to(embedded, rel, resource)
        return embedded
