from blinker import Namespace

_hypermedia = Namespace()

request_dispatched = _hypermedia.signal('request-dispatched')

resource_resolved = _hypermedia.signal('resource-resolved')

resolution_failed = _hypermedia.signal('resolution-failed')

curies_bound = _hypermedia.signal('curies-bound')
