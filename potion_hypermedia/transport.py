import asyncio
import functools
import logging

import requests

from .exceptions import TransportFailure
from .utils import to_headers

logger = logging.getLogger(__name__)


class Request(object):
    """
    :param str method: HTTP method (upper case)
    :param str url: absolute request URL
    :param headers: request headers
    :param body: request body, passed to the transport as-is
    """

    def __init__(self, method, url, headers=None, body=None):
        self.method = method.upper()
        self.url = url
        self.headers = to_headers(headers)
        self.body = body

    def __repr__(self):
        return '<{} {} {}>'.format(self.__class__.__name__, self.method, self.url)


class Response(object):
    """
    :param int status_code: HTTP status code
    :param headers: response headers
    :param body: response body; bytes, text or an already decoded document
    :param str url: final URL of the response, if the transport followed redirects
    """

    def __init__(self, status_code, headers=None, body=None, url=None):
        self.status_code = status_code
        self.headers = to_headers(headers)
        self.body = body
        self.url = url

    def __repr__(self):
        return '<{} [{}]>'.format(self.__class__.__name__, self.status_code)


class Transport(object):
    """
    The interface between resource resolution and the network. Transports are responsible for sending requests,
    following redirects, and any timeouts, retries or connection pooling.
    """

    async def request(self, method, url, headers=None, body=None):
        """
        :return: a :class:`Response`
        :raises TransportFailure: if the request could not be completed
        """
        raise NotImplementedError()


class RequestsTransport(Transport):
    """
    A transport that sends requests with a :class:`requests.Session`. Requests run in ``executor`` (the event loop's
    default executor if ``None``) so that the event loop is never blocked.

    :param requests.Session session: optional session, e.g. one with authentication configured
    :param concurrent.futures.Executor executor: optional executor
    :param timeout: optional timeout passed on to ``requests``
    """

    def __init__(self, session=None, executor=None, timeout=None):
        self.session = session or requests.Session()
        self.executor = executor
        self.timeout = timeout

    async def request(self, method, url, headers=None, body=None):
        loop = asyncio.get_running_loop()
        send = functools.partial(self.session.request,
                                 method,
                                 url,
                                 headers=dict(to_headers(headers)),
                                 data=body,
                                 timeout=self.timeout)

        logger.debug('%s %s', method, url)
        try:
            response = await loop.run_in_executor(self.executor, send)
        except requests.RequestException as e:
            raise TransportFailure(url, e) from e

        return Response(response.status_code, response.headers, response.content, url=response.url)
