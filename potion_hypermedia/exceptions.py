from werkzeug.http import HTTP_STATUS_CODES


class HypermediaException(Exception):

    def as_dict(self):
        return {
            'error': self.__class__.__name__,
            'message': str(self)
        }


class RelationNotFound(HypermediaException, LookupError):
    """
    Raised synchronously when a relation, or the requested index within a relation, is not present on a resource.

    :param resource: the :class:`Resource` the lookup was made on
    :param str rel: relation name as requested
    :param int index: requested index within the relation
    """

    def __init__(self, resource, rel, index=0):
        super(RelationNotFound, self).__init__(rel, index)
        self.resource = resource
        self.rel = rel
        self.index = index

    def __str__(self):
        url = getattr(self.resource, 'url', None)
        message = 'No relation "{}" at index {} in <{}>'.format(self.rel, self.index, url)

        state = getattr(self.resource, 'state', 'resolved')
        if state != 'resolved':
            message += ' (resource is {}; resolve it first)'.format(state)
        return message

    def as_dict(self):
        dct = super(RelationNotFound, self).as_dict()
        dct['relation'] = {
            "$rel": self.rel,
            "$index": self.index
        }
        return dct


class ResolutionFailed(HypermediaException):
    """
    Base class for failures that are only ever surfaced through the deferred value of a resolution.
    """

    def __init__(self, url):
        super(ResolutionFailed, self).__init__(url)
        self.url = url


class TransportFailure(ResolutionFailed):

    def __init__(self, url, reason=None):
        super(TransportFailure, self).__init__(url)
        self.reason = reason

    def __str__(self):
        if self.reason is None:
            return 'Request to <{}> failed'.format(self.url)
        return 'Request to <{}> failed: {}'.format(self.url, self.reason)


class UnexpectedStatus(ResolutionFailed):

    def __init__(self, url, response):
        super(UnexpectedStatus, self).__init__(url)
        self.response = response

    @property
    def status_code(self):
        return self.response.status_code

    def __str__(self):
        return '<{}> responded with {} {}'.format(self.url,
                                                  self.status_code,
                                                  HTTP_STATUS_CODES.get(self.status_code, ''))

    def as_dict(self):
        dct = super(UnexpectedStatus, self).as_dict()
        dct['status'] = self.status_code
        return dct
