import asyncio
import logging

from werkzeug.utils import cached_property

from . import signals
from .exceptions import RelationNotFound, TransportFailure, UnexpectedStatus
from .transport import Request
from .utils import to_headers

logger = logging.getLogger(__name__)

UNRESOLVED = 'unresolved'
RESOLVING = 'resolving'
RESOLVED = 'resolved'
FAILED = 'failed'


class Resource(object):
    """
    A node in a hypermedia resource graph.

    A resource is either created from a response, embedded in the document of another resource, or referenced by
    URL through a :class:`Context`. In the latter case it starts out *unresolved* and is fetched on :meth:`resolve`:

    =====================  ==============================================================================
    State                  Description
    =====================  ==============================================================================
    ``unresolved``         URL known, no response yet
    ``resolving``          a request has been dispatched; every caller waits for the same request
    ``resolved``           response received and accepted; links, data and embedded resources available
    ``failed``             the transport failed or the response status was not accepted; see :attr:`error`
    =====================  ==============================================================================

    Links, data and embedded resources are parsed by the :attr:`extension` selected for the response the first time
    they are accessed and are memoized from then on. A resolved resource that no extension applies to is *opaque*:
    it has no links, data or embedded resources.

    Relations are matched through the curie bindings of the context at the time of the lookup, so
    ``resource.links('http://api.co/rel/find')`` also returns links parsed as ``ea:find`` once the ``ea`` prefix is
    bound anywhere in the traversal.

    :param Context context: the context this resource belongs to
    :param str url: canonical URL of the resource, if known

    .. attribute:: document

        The decoded response body, or the embedded document.

    .. attribute:: extension

        The :class:`Extension` that parses :attr:`document`, or ``None``.

    .. attribute:: error

        A :class:`ResolutionFailed` exception if resolution failed.
    """

    def __init__(self, context, url=None):
        self.context = context
        self.url = url
        self.state = UNRESOLVED
        self.request = None
        self.status_code = None
        self.headers = to_headers(None)
        self.document = None
        self.extension = None
        self.error = None
        self._future = None

    @classmethod
    def from_response(cls, response, context, request=None):
        """
        Returns a resolved resource for a response. If the URL is known, the resource is registered with the
        context so that links back to it are not fetched again.

        :param Response response:
        :param Context context:
        :param Request request: the request the response answers
        """
        url = request.url if request is not None else response.url
        if url:
            url = context.canonical_url(url)

        resource = cls(context, url)
        resource._set_response(request, response)

        if url:
            context.resources[url] = resource
        return resource

    @classmethod
    def from_embedded(cls, document, headers, context, extension=None, request=None):
        """
        Returns a resolved resource for a document embedded in another document.

        :param document: embedded document
        :param headers: headers of the enclosing response
        :param Context context: context of the enclosing resource
        :param Extension extension: extension that parses ``document``; selected from ``headers`` if ``None``
        :param Request request: request of the enclosing resource, used to resolve relative links
        """
        resource = cls(context)
        resource.request = request
        resource.headers = to_headers(headers)
        resource.document = document

        if extension is None:
            extension = context.select_extension(request, resource.headers, None)
        resource.extension = extension
        resource._resolved()

        self_links = resource.links('self')
        if self_links:
            resource.url = self_links[0].absolute_url()
        return resource

    @property
    def resolved(self):
        return self.state == RESOLVED

    @property
    def failed(self):
        return self.state == FAILED

    def resolve(self, headers=None):
        """
        Returns a deferred value that completes with this resource once it is resolved, or fails with a
        :class:`ResolutionFailed` exception. The first call on an unresolved resource dispatches the request; all
        later calls wait for that same request.

        Cancelling the returned value, e.g. through :func:`asyncio.wait_for`, does not cancel the request other
        callers are waiting for. If the request itself is cancelled, the resource fails with a
        :class:`TransportFailure`.

        Must be called from within a running event loop.

        :param headers: optional request headers in addition to the context defaults
        """
        if self._future is None:
            if self.state == RESOLVED:
                self._future = asyncio.get_running_loop().create_future()
                self._future.set_result(self)
            else:
                self.state = RESOLVING
                self._future = asyncio.ensure_future(self._fetch(headers))
                self._future.add_done_callback(self._fetch_done)
        return asyncio.shield(self._future)

    def _fetch_done(self, future):
        if future.cancelled():
            if self.state == RESOLVING:
                self._fail(TransportFailure(self.url, 'request cancelled'))
        else:
            # failures are kept in self.error
            future.exception()

    async def _fetch(self, headers):
        request = Request('GET', self.url, self.context.request_headers(headers))
        self.request = request

        logger.debug('Dispatching %r', request)
        signals.request_dispatched.send(self, request=request)

        try:
            response = await self.context.transport.request(request.method, request.url, request.headers,
                                                            request.body)
        except TransportFailure as e:
            self._fail(e)
            raise
        except Exception as e:
            failure = TransportFailure(self.url, e)
            self._fail(failure)
            raise failure from e

        if not self.context.is_success(response.status_code):
            self.status_code = response.status_code
            self.headers = response.headers
            raise self._fail(UnexpectedStatus(self.url, response))

        self._set_response(request, response)
        signals.resource_resolved.send(self)
        return self

    def _fail(self, error):
        logger.debug('Resolution of <%s> failed: %s', self.url, error)
        self.state = FAILED
        self.error = error
        signals.resolution_failed.send(self, error=error)
        return error

    def _set_response(self, request, response):
        # relative links resolve against the final URL if the transport followed a redirect
        if response.url and (request is None or response.url != request.url):
            if request is None:
                request = Request('GET', response.url)
            else:
                request = Request(request.method, response.url, request.headers, request.body)

        self.request = request
        self.status_code = response.status_code
        self.headers = response.headers
        self.extension = self.context.select_extension(request, response.headers, response.status_code)

        if self.extension is None:
            logger.debug('No extension applies to <%s> (%s); resource is opaque',
                         self.url,
                         response.headers.get('Content-Type'))
            self.document = response.body
        else:
            self.document = self.extension.load(response.body)
        self._resolved()

    def _resolved(self):
        self.state = RESOLVED
        # bind curie prefixes right away so that the rest of the traversal can use them
        self.context.bind_curies(self._curies)

    @cached_property
    def _curies(self):
        if self.extension is None:
            return {}
        return self.extension.curie_prefix_parser(self.document, self.headers, self.context)

    @cached_property
    def _links(self):
        if self.extension is None:
            return {}
        return self.extension.link_parser(self.document, self.headers, self.request, self.context)

    @cached_property
    def _properties(self):
        if self.extension is None:
            return []
        return self.extension.data_parser(self.document, self.headers)

    @cached_property
    def _embedded(self):
        if self.extension is None:
            return {}
        return self.extension.embedded_parser(self.document, self.headers, self.context, request=self.request)

    def _find(self, attribute, rel):
        if self.state != RESOLVED:
            return []

        expanded = self.context.expand_curie(rel)
        found = []
        for name, values in getattr(self, attribute).items():
            if name == rel or self.context.expand_curie(name) == expanded:
                found.extend(values)
        return found

    @property
    def relations(self):
        """
        Link relation names as they appear in the document.
        """
        if self.state != RESOLVED:
            return []
        return list(self._links)

    def has(self, rel):
        return bool(self.links(rel) or self.embedded_resources(rel))

    def links(self, rel):
        """
        :return: a list of :class:`Link` objects; empty if there is no such relation
        """
        return self._find('_links', rel)

    def link(self, rel, index=0):
        """
        A resource that is not resolved has no relations yet; :meth:`resolve` it first.

        :raises RelationNotFound: if there is no link at ``index`` for ``rel``
        """
        links = self.links(rel)
        if not 0 <= index < len(links):
            raise RelationNotFound(self, rel, index)
        return links[index]

    def embedded_resources(self, rel):
        return self._find('_embedded', rel)

    def embedded(self, rel, index=0):
        """
        :raises RelationNotFound: if there is no embedded resource at ``index`` for ``rel``
        """
        resources = self.embedded_resources(rel)
        if not 0 <= index < len(resources):
            raise RelationNotFound(self, rel, index)
        return resources[index]

    @property
    def properties(self):
        """
        All data entries as a list of :class:`Property` tuples, in document order.
        """
        if self.state != RESOLVED:
            return []
        return list(self._properties)

    def data(self, name, default=None):
        for item in self.properties:
            if item.name == name:
                return item.value
        return default

    def reference(self, rel, index=0, params=None):
        """
        Returns the resource a link points to without fetching it. The resource is shared through the context, so it
        may already be resolved.

        :raises RelationNotFound:
        """
        link = self.link(rel, index)
        return self.context.resource(link.absolute_url(params, base=self.url))

    def follow(self, rel, index=0, params=None, headers=None):
        """
        Follows a relation. An embedded resource is preferred over a link, in which case no request is made. A
        resource that is not resolved has no relations yet.

        :param str rel: relation name or URI
        :param int index: index within the relation
        :param dict params: URI template parameters for templated links
        :param headers: optional request headers
        :return: a deferred value completing with a :class:`Resource`
        :raises RelationNotFound: synchronously, before any request is made
        """
        resources = self.embedded_resources(rel)
        if resources:
            if not 0 <= index < len(resources):
                raise RelationNotFound(self, rel, index)
            return resources[index].resolve()

        link = self.link(rel, index)
        return self.context.follow_link(link, params=params, headers=headers, base=self.url)

    def follow_all(self, rel, params=None, headers=None):
        """
        Follows every link, or returns every embedded resource, of a relation.

        :return: a deferred value completing with a list of :class:`Resource` objects
        :raises RelationNotFound: if the relation does not exist
        """
        resources = self.embedded_resources(rel)
        if resources:
            futures = [resource.resolve() for resource in resources]
        else:
            futures = [self.context.follow_link(link, params=params, headers=headers, base=self.url)
                       for link in self.links(rel)]

        if not futures:
            raise RelationNotFound(self, rel)
        return asyncio.gather(*futures)

    def __repr__(self):
        return '<{} {} [{}]>'.format(self.__class__.__name__, self.url, self.state)
