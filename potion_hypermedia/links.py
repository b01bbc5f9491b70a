from collections import namedtuple

import rfc3987
from uritemplate import URITemplate

LINK_ATTRIBUTES = ('title', 'type', 'name', 'profile', 'hreflang', 'deprecation')


def split_curie(rel):
    """
    Splits a compact relation name ``prefix:local`` into ``(prefix, local)``. Returns ``(None, rel)`` for names
    without a prefix.
    """
    if not rel or ':' not in rel:
        return None, rel
    prefix, local = rel.split(':', 1)
    if not prefix or local.startswith('//'):
        return None, rel
    return prefix, local


def resolve_url(href, base=None):
    """
    Resolves ``href`` against ``base`` following RFC 3986. ``href`` is returned unchanged if ``base`` is missing or
    is not an absolute URI.
    """
    if not base or rfc3987.match(base, rule='absolute_IRI') is None:
        return href
    return rfc3987.resolve(base, href)


class Property(namedtuple('Property', ('name', 'value'))):
    """
    A single data entry of a resource. Documents may contain more than one entry with the same name.
    """
    __slots__ = ()


class Link(namedtuple('Link', ('rel', 'href', 'templated') + LINK_ATTRIBUTES + ('base',))):
    """
    An immutable link to another resource.

    :param str rel: relation name as it appears in the document, possibly a compact curie (``prefix:local``)
    :param str href: target URI or URI template
    :param bool templated: whether ``href`` is an RFC 6570 URI template
    :param str base: URL of the document the link was parsed from; used to resolve relative hrefs
    """
    __slots__ = ()

    def __new__(cls, rel, href, templated=False, title=None, type=None, name=None, profile=None, hreflang=None,
                deprecation=None, base=None):
        return super(Link, cls).__new__(cls, rel, href, bool(templated), title, type, name, profile, hreflang,
                                        deprecation, base)

    @classmethod
    def from_object(cls, rel, obj, base=None, templated=None):
        """
        Builds a link from a JSON link object such as ``{"href": "/orders/1", "title": "Order"}``.

        :return: a :class:`Link` or ``None`` if ``obj`` has no string ``href``
        """
        if not isinstance(obj, dict) or not isinstance(obj.get('href'), str):
            return None

        if templated is None:
            templated = obj.get('templated') is True

        return cls(rel,
                   obj['href'],
                   templated=templated,
                   base=base,
                   **{attr: obj[attr] for attr in LINK_ATTRIBUTES if attr in obj})

    @property
    def variables(self):
        if not self.templated:
            return ()
        return tuple(sorted(URITemplate(self.href).variable_names))

    def expand(self, params=None):
        """
        Expands the URI template with ``params``. Links that are not templated return :attr:`href` unchanged.
        """
        if not self.templated:
            return self.href
        return URITemplate(self.href).expand(dict(params or {}))

    def absolute_url(self, params=None, base=None):
        """
        Returns the expanded href resolved against the URL of the document the link was parsed from, or against
        ``base`` if that is not known.
        """
        return resolve_url(self.expand(params), self.base or base)


class CurieTemplate(object):
    """
    A compact URI binding, such as ``ea`` to ``http://api.co/rel/{rel}``.

    :param str prefix: curie prefix
    :param str href: URI template with a single ``{rel}`` placeholder
    """

    def __init__(self, prefix, href):
        self.prefix = prefix
        self.href = href
        self._template = URITemplate(href)

    def expand(self, rel):
        return self._template.expand(rel=rel)

    def __eq__(self, other):
        return isinstance(other, CurieTemplate) and (self.prefix, self.href) == (other.prefix, other.href)

    def __ne__(self, other):
        return not self == other

    def __hash__(self):
        return hash((self.prefix, self.href))

    def __repr__(self):
        return '{}({}, {})'.format(self.__class__.__name__, repr(self.prefix), repr(self.href))
