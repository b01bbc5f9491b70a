from .context import Context
from .contrib import CollectionJsonExtension, HalExtension, SirenExtension
from .extension import JsonExtension
from .transport import RequestsTransport


def default_extensions(additional_media_types=None):
    """
    Returns the built-in extensions in order of precedence: HAL, Siren, Collection+JSON and plain JSON.

    :param dict additional_media_types: optional mapping of extension class to a list of additional media types,
        e.g. ``{HalExtension: ['application/vnd.co.format+json']}``
    """
    additional_media_types = additional_media_types or {}
    return [extension(additional_media_types.get(extension))
            for extension in (HalExtension, SirenExtension, CollectionJsonExtension, JsonExtension)]


class Client(object):
    """
    The root of a hypermedia API.

    Each call to :meth:`follow` starts an independent traversal with its own :class:`Context`, so resources and curie
    bindings are never shared between traversals.

    .. code-block:: python

        client = Client('http://api.example.com/')

        async def latest_post_title():
            root = await client.follow()
            posts = await root.follow('posts')
            post = await posts.follow('item', 0)
            return post.data('title')

    :param str url: URL of the API root
    :param Transport transport: defaults to a :class:`RequestsTransport`
    :param list extensions: extensions in order of precedence; defaults to :func:`default_extensions`
    :param headers: default headers for every request, e.g. ``{'Authorization': 'Bearer ...'}``
    :param dict additional_media_types: additional media types for the default extensions
    :param success_codes: status codes accepted as success; defaults to any ``2xx`` code
    """

    def __init__(self,
                 url,
                 transport=None,
                 extensions=None,
                 headers=None,
                 additional_media_types=None,
                 success_codes=None):
        self.url = url
        self.transport = transport or RequestsTransport()
        self.extensions = tuple(extensions or default_extensions(additional_media_types))
        self.headers = headers
        self.success_codes = success_codes

    def context(self):
        return Context(self.transport,
                       self.extensions,
                       headers=self.headers,
                       success_codes=self.success_codes)

    def follow(self, headers=None):
        """
        :return: a deferred value completing with the root :class:`Resource`
        """
        return self.context().fetch(self.url, headers)

    def __repr__(self):
        return '{}({})'.format(self.__class__.__name__, repr(self.url))
