import logging

import rfc3987

from . import signals
from .links import resolve_url, split_curie
from .resource import Resource, UNRESOLVED
from .utils import to_headers

logger = logging.getLogger(__name__)

DEFAULT_SUCCESS_CODES = frozenset(range(200, 300))


class Context(object):
    """
    The shared scope of a single traversal: the extension registry, a cache of resources by canonical URL, and the
    curie bindings collected from the documents parsed so far.

    A URL is fetched at most once per context. Resources are registered in the cache before their request is
    dispatched, so concurrent or re-entrant follows of the same URL, including links back to an ancestor, share one
    request. Contexts are not meant to be shared between independent traversals.

    :param Transport transport: the transport used to fetch resources
    :param list extensions: extensions in order of precedence
    :param headers: default request headers
    :param success_codes: status codes accepted as success; defaults to any ``2xx`` code
    """

    def __init__(self, transport=None, extensions=(), headers=None, success_codes=None):
        self.transport = transport
        self.extensions = tuple(extensions)
        self.headers = to_headers(headers)
        self.success_codes = frozenset(success_codes) if success_codes is not None else DEFAULT_SUCCESS_CODES
        self.resources = {}
        self.curies = {}

    def select_extension(self, request, headers, status_code):
        """
        :return: the first extension that applies to the response, or ``None``
        """
        for extension in self.extensions:
            if extension.applies(request, headers, status_code):
                return extension
        return None

    def bind_curies(self, curies):
        """
        Merges curie templates into the bindings of this context; later bindings replace earlier ones with the same
        prefix.
        """
        changed = {prefix: curie for prefix, curie in curies.items() if self.curies.get(prefix) != curie}
        if changed:
            self.curies.update(changed)
            signals.curies_bound.send(self, curies=changed)
        return self.curies

    def expand_curie(self, rel):
        """
        Expands a compact relation name if its prefix is bound; returns ``rel`` unchanged otherwise.
        """
        prefix, local = split_curie(rel)
        if prefix is None or prefix not in self.curies:
            return rel
        return self.curies[prefix].expand(local)

    def canonical_url(self, url, base=None):
        url = resolve_url(url, base)
        try:
            parts = rfc3987.parse(url, rule='IRI_reference')
        except ValueError:
            return url.split('#', 1)[0]
        parts['fragment'] = None
        return rfc3987.compose(**parts)

    def accept_header(self):
        media_types = []
        for extension in self.extensions:
            for media_type in extension.media_types:
                if media_type not in media_types:
                    media_types.append(media_type)
        return ', '.join(media_types)

    def request_headers(self, headers=None):
        """
        Returns the default headers with an ``Accept`` header for the registered media types, overridden by
        ``headers``.
        """
        result = self.headers.copy()

        accept = self.accept_header()
        if accept and 'Accept' not in result:
            result['Accept'] = accept

        for key, value in to_headers(headers).items():
            result.set(key, value)
        return result

    def is_success(self, status_code):
        return status_code in self.success_codes

    def resource(self, url):
        """
        Returns the cached resource for ``url`` or registers a new, unresolved one. A resource whose resolution
        failed is replaced so that it can be retried.
        """
        url = self.canonical_url(url)
        resource = self.resources.get(url)

        if resource is None or resource.failed:
            resource = Resource(self, url)
            self.resources[url] = resource
        return resource

    def fetch(self, url, headers=None):
        """
        :return: a deferred value completing with the resolved :class:`Resource` for ``url``
        """
        if self.transport is None:
            raise RuntimeError('Cannot fetch <{}>: the context has no transport.'.format(url))

        resource = self.resource(url)
        if resource.state != UNRESOLVED:
            logger.debug('Cache hit for <%s> (%s)', resource.url, resource.state)
        return resource.resolve(headers)

    def follow_link(self, link, params=None, headers=None, base=None):
        """
        :param Link link:
        :param dict params: URI template parameters
        :param headers: optional request headers
        :param str base: URL to resolve the link against if the link does not know the document it came from
        """
        return self.fetch(link.absolute_url(params, base=base), headers)
