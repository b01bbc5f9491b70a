from ..extension import Extension, append_to, base_url
from ..links import CurieTemplate, Link, Property
from ..resource import Resource
from ..utils import ensure_list


class HalExtension(Extension):
    """
    Hypertext Application Language (``application/hal+json``).

    Links are read from ``_links``, where each relation holds either a single link object or a list of link
    objects. Compact relation names are bound through the reserved ``curies`` relation. Embedded resources are read
    from ``_embedded`` and are parsed as HAL regardless of the response content type.
    """
    standard_media_types = ('application/hal+json', 'application/vnd.hal+json')

    links_key = '_links'
    embedded_key = '_embedded'
    curies_rel = 'curies'

    def _container(self, document, key):
        if isinstance(document, dict) and isinstance(document.get(key), dict):
            return document[key]
        return {}

    def link_parser(self, document, headers, request, context):
        links = {}
        for rel, value in self._container(document, self.links_key).items():
            if rel == self.curies_rel:
                continue
            for obj in ensure_list(value):
                append_to(links, rel, Link.from_object(rel, obj, base=base_url(request)))
        return links

    def curie_prefix_parser(self, document, headers, context):
        curies = {}
        for obj in ensure_list(self._container(document, self.links_key).get(self.curies_rel)):
            if not isinstance(obj, dict) or obj.get('templated') is not True:
                continue

            name, href = obj.get('name'), obj.get('href')
            if isinstance(name, str) and isinstance(href, str) and '{rel}' in href:
                curies[name] = CurieTemplate(name, href)
        return curies

    def data_parser(self, document, headers):
        if not isinstance(document, dict):
            return []
        return [Property(name, value)
                for name, value in document.items()
                if name not in (self.links_key, self.embedded_key)]

    def embedded_parser(self, document, headers, context, request=None):
        embedded = {}
        for rel, value in self._container(document, self.embedded_key).items():
            for obj in ensure_list(value):
                if isinstance(obj, dict):
                    append_to(embedded, rel, Resource.from_embedded(obj, headers, context, extension=self, request=request))
        return embedded
