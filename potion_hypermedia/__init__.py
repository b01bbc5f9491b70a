from .client import Client, default_extensions
from .context import Context
from .exceptions import (HypermediaException, RelationNotFound, ResolutionFailed, TransportFailure,
                         UnexpectedStatus)
from .extension import Extension, JsonExtension
from .links import CurieTemplate, Link, Property
from .resource import Resource
from .transport import Request, RequestsTransport, Response, Transport

__all__ = (
    'Client',
    'Context',
    'Resource',
    'Extension',
    'JsonExtension',
    'Link',
    'CurieTemplate',
    'Property',
    'Request',
    'Response',
    'Transport',
    'RequestsTransport',
    'HypermediaException',
    'RelationNotFound',
    'ResolutionFailed',
    'TransportFailure',
    'UnexpectedStatus',
    'default_extensions',
    'contrib',
    'signals',
)
