import asyncio
import json
import unittest
from contextlib import contextmanager
from functools import partial

from blinker import ANY
from flask import Flask, Response as FlaskResponse, abort, request

from potion_hypermedia import signals
from potion_hypermedia.transport import Request, Response, Transport

HAL = 'application/hal+json'
SIREN = 'application/vnd.siren+json'
COLLECTION_JSON = 'application/vnd.collection+json'
JSON = 'application/json'

POSTS = [
    {'title': 'First Post!', 'body': 'Potion rocks!'},
    {'title': 'Hypermedia clients', 'body': 'Follow your nose.'},
    {'title': 'Collection+JSON', 'body': 'Items, queries and templates.'},
]


def _document(data, mimetype, status=200, headers=None):
    return FlaskResponse(json.dumps(data), status=status, mimetype=mimetype, headers=headers)


def _post_item(i, post):
    return {
        'href': '/api/posts/{}'.format(i),
        'data': [
            {'name': 'title', 'value': post['title'], 'prompt': 'Post Title'},
            {'name': 'body', 'value': post['body'], 'prompt': 'Post Content'}
        ],
        'links': [
            {'rel': 'author', 'href': '/api/things/1', 'prompt': 'Author'}
        ]
    }


def create_api_app():
    """
    A Flask application that serves fixed hypermedia documents below ``/api``.
    """
    app = Flask(__name__)

    @app.route('/api/')
    def root():
        mimetype = request.accept_mimetypes.best_match([HAL, COLLECTION_JSON, SIREN])

        if mimetype == HAL:
            return _document({
                '_links': {
                    'self': {'href': '/api/'},
                    'curies': [{'name': 'ex', 'href': 'http://localhost/api/rels/{rel}', 'templated': True}],
                    'ex:posts': {'href': '/api/posts', 'type': COLLECTION_JSON},
                    'thing-template': {'href': '/api/things{/id}', 'templated': True},
                    'pages': {'href': '/api/pages'},
                    'empty': {'href': '/api/empty'},
                    'missing': {'href': '/api/missing'},
                    'text': {'href': '/api/text'}
                },
                '_embedded': {
                    'ex:featured': {
                        '_links': {'self': {'href': '/api/things/1'}},
                        'name': 'Thing 1'
                    }
                },
                'title': 'Potion Hypermedia'
            }, HAL)

        if mimetype == COLLECTION_JSON:
            return _document({
                'collection': {
                    'version': '1.0',
                    'href': '/api/',
                    'links': [
                        {'rel': 'posts', 'href': '/api/posts'}
                    ],
                    'items': [
                        {
                            'href': 'http://example.org/friends/jdoe',
                            'data': [
                                {'name': 'full-name', 'value': 'J. Doe', 'prompt': 'Full Name'},
                                {'name': 'email', 'value': 'jdoe@example.org', 'prompt': 'Email'}
                            ],
                            'links': [
                                {'rel': 'blog', 'href': 'http://examples.org/blogs/jdoe', 'prompt': 'Blog'},
                                {'rel': 'avatar', 'href': 'http://examples.org/images/jdoe', 'prompt': 'Avatar',
                                 'render': 'image'}
                            ]
                        },
                        {
                            'href': 'http://example.org/friends/msmith',
                            'data': [
                                {'name': 'full-name', 'value': 'M. Smith', 'prompt': 'Full Name'},
                                {'name': 'email', 'value': 'msmith@example.org', 'prompt': 'Email'}
                            ],
                            'links': [
                                {'rel': 'blog', 'href': 'http://examples.org/blogs/msmith', 'prompt': 'Blog'},
                                {'rel': 'avatar', 'href': 'http://examples.org/images/msmith', 'prompt': 'Avatar',
                                 'render': 'image'}
                            ]
                        }
                    ],
                    'template': {
                        'data': [
                            {'name': 'full-name', 'prompt': 'Full Name'},
                            {'name': 'email', 'prompt': 'Email'}
                        ]
                    }
                }
            }, COLLECTION_JSON)

        if mimetype == SIREN:
            return _document({
                'class': ['root'],
                'properties': {'title': 'Potion Hypermedia'},
                'entities': [
                    {'rel': ['posts'], 'href': '/api/posts', 'type': COLLECTION_JSON},
                    {
                        'rel': ['featured'],
                        'properties': {'name': 'Thing 1'},
                        'links': [{'rel': ['self'], 'href': '/api/things/1'}]
                    }
                ],
                'actions': [
                    {'name': 'search', 'title': 'Search Posts', 'href': '/api/posts',
                     'fields': [{'name': 'q', 'title': 'Search'}]},
                    {'name': 'create-form', 'title': 'New Post', 'href': '/api/posts', 'method': 'POST',
                     'fields': [{'name': 'title', 'title': 'Title'}, {'name': 'post', 'title': 'Post'}]}
                ],
                'links': [
                    {'rel': ['self'], 'href': '/api/'}
                ]
            }, SIREN)

        return _document({'message': 'Not Acceptable'}, JSON, status=406)

    @app.route('/api/posts')
    def posts():
        mimetype = request.accept_mimetypes.best_match([COLLECTION_JSON, JSON])

        if mimetype == JSON:
            return _document(request.args.to_dict(), JSON)

        query = request.args.get('q', '').lower()
        return _document({
            'collection': {
                'version': '1.0',
                'href': request.full_path.rstrip('?'),
                'links': [
                    {'rel': 'root', 'href': '/api/'}
                ],
                'items': [_post_item(i, post)
                          for i, post in enumerate(POSTS, start=1)
                          if query in post['title'].lower()],
                'queries': [
                    {'rel': 'search', 'href': '/api/posts', 'prompt': 'Search', 'data': [{'name': 'q', 'value': ''}]}
                ],
                'template': {
                    'data': [
                        {'name': 'title', 'prompt': 'Post Title'},
                        {'name': 'body', 'prompt': 'Post Content'}
                    ]
                }
            }
        }, COLLECTION_JSON)

    @app.route('/api/posts/<int:id>')
    def post(id):
        if not 1 <= id <= len(POSTS):
            abort(404)

        return _document({
            'collection': {
                'version': '1.0',
                'href': '/api/posts',
                'items': [_post_item(id, POSTS[id - 1])]
            }
        }, COLLECTION_JSON)

    @app.route('/api/things/<id>')
    def thing(id):
        return _document({
            '_links': {
                'self': {'href': '/api/things/{}'.format(id)},
                'up': {'href': '/api/'}
            },
            'name': 'Thing {}'.format(id)
        }, HAL)

    @app.route('/api/pages')
    def pages():
        page = request.args.get('page', 1, type=int)
        links = ['</api/pages?page={}>; rel="self"'.format(page), '</api/pages?page=1>; rel="first"']
        if page < 3:
            links.append('</api/pages?page={}>; rel="next"'.format(page + 1))

        return _document({'page': page, 'items': ['item {}'.format(page)]}, JSON, headers={
            'Link': ','.join(links),
            'X-Total-Count': '3'
        })

    @app.route('/api/empty')
    def empty():
        return '', 204

    @app.route('/api/text')
    def text():
        return FlaskResponse('Hello', mimetype='text/plain')

    return app


class FlaskTransport(Transport):
    """
    Sends requests to a Flask application through its test client.
    """

    def __init__(self, app):
        self.client = app.test_client()
        self.requests = []

    async def request(self, method, url, headers=None, body=None):
        self.requests.append(Request(method, url, headers, body))
        await asyncio.sleep(0)

        response = self.client.open(url, method=method, headers=headers, data=body)
        return Response(response.status_code, response.headers, response.get_data(), url=url)


class StubTransport(Transport):
    """
    Serves fixed responses by URL and records every dispatched request. Unknown URLs respond with ``404``. Responses
    can be delayed per URL, and can report a different final URL as if the request had been redirected.
    """

    def __init__(self):
        self.responses = {}
        self.requests = []
        self.delays = {}

    def add(self, url, document, content_type=HAL, status_code=200, headers=None, final_url=None):
        response_headers = {'Content-Type': content_type}
        response_headers.update(headers or {})

        body = document if isinstance(document, (str, bytes)) else json.dumps(document)
        self.responses[url] = Response(status_code, response_headers, body, url=final_url or url)

    def fail(self, url, error):
        self.responses[url] = error

    def dispatched(self, url=None):
        return [r.url for r in self.requests if url is None or r.url == url]

    async def request(self, method, url, headers=None, body=None):
        self.requests.append(Request(method, url, headers, body))
        await asyncio.sleep(self.delays.get(url, 0))

        response = self.responses.get(url)
        if isinstance(response, Exception):
            raise response
        if response is None:
            return Response(404, {'Content-Type': 'text/plain'}, 'Not Found', url=url)
        return response


@contextmanager
def record_signals(*watched, sender=ANY):
    events = []

    def receiver_(signal, sender, **kwargs):
        events.append((signal, sender, kwargs))

    receivers = {signal: partial(receiver_, signal) for signal in watched or (
        signals.request_dispatched,
        signals.resource_resolved,
        signals.resolution_failed,
        signals.curies_bound
    )}

    for signal, receiver in receivers.items():
        signal.connect(receiver, sender=sender, weak=False)

    try:
        yield events
    finally:
        for signal, receiver in receivers.items():
            signal.disconnect(receiver)


class BaseTestCase(unittest.TestCase):

    def assertHrefs(self, expected, links, msg=None):
        self.assertEqual(expected, [link.href for link in links], msg)


class AsyncTestCase(unittest.IsolatedAsyncioTestCase):

    def assertHrefs(self, expected, links, msg=None):
        self.assertEqual(expected, [link.href for link in links], msg)
