"""Runtime support for generated API clients.

A generated module binds a :class:`Runtime` to its ``defaults`` and calls
``runtime.fetch_json(url, opts)`` (or ``fetch_text``) from every operation
function. Responses are plain dicts of the form ``{'status': ..., 'data': ...}``
so callers can branch on the status code:

    >>> res = api.get_book_by_id(1)
    >>> if res['status'] == 200:
    ...     print(res['data']['name'])

or unwrap the success payload with :func:`ok`, which raises
:class:`HttpError` for any other status.
"""

import functools
import inspect
import json
import logging
from collections.abc import Callable, Mapping
from types import ModuleType, SimpleNamespace
from typing import Any

import httpx
from typing_extensions import NotRequired, TypedDict

from oaforge.runtime import query
from oaforge.runtime.utils import join_url, strip_none

logger = logging.getLogger(__name__)

__all__ = [
    'ApiResponse',
    'HttpError',
    'RequestOpts',
    'Runtime',
    'TextResponse',
    'handle',
    'ok',
    'okify',
    'optimistic',
]


class RequestOpts(TypedDict, total=False):
    """Options of a single request, merged over the module ``defaults``."""

    base_url: str
    method: str
    headers: dict[str, Any]
    body: Any
    content: str | bytes
    data: dict[str, Any]
    files: dict[str, Any]
    timeout: float | None
    client: httpx.Client


class ApiResponse(TypedDict):
    status: int
    data: NotRequired[Any]


class TextResponse(TypedDict):
    status: int
    data: str


class HttpError(Exception):
    """Raised when a response does not have a 2xx status.

    Attributes:
        status: The HTTP status code.
        data: The decoded response body, if any.
    """

    def __init__(self, status: int, data: Any = None):
        self.status = status
        self.data = data
        super().__init__(f'Error: {status}')


def _is_success(status: int) -> bool:
    return 200 <= status < 300


def ok(response: Mapping[str, Any]) -> Any:
    """Return the data of a 2xx response, raise :class:`HttpError` otherwise."""
    status = response['status']
    if _is_success(status):
        return response.get('data')
    raise HttpError(status, response.get('data'))


def handle(response: Mapping[str, Any], handlers: Mapping[int | str, Callable]) -> Any:
    """Dispatch a response to the handler registered for its status.

    Handlers are looked up by status code (``200`` or ``'200'``) and receive the
    data. A ``'default'`` handler receives ``(status, data)`` for every status
    without a handler of its own. An unhandled status raises :class:`HttpError`.
    """
    status = response['status']
    data = response.get('data')
    handler = handlers.get(status) or handlers.get(str(status))
    if handler is not None:
        return handler(data)
    if 'default' in handlers:
        return handlers['default'](status, data)
    raise HttpError(status, data)


def okify(fn: Callable[..., Mapping[str, Any]]) -> Callable[..., Any]:
    """Wrap an operation function so it returns the success data directly."""

    @functools.wraps(fn)
    def wrapper(*args, **kwargs):
        return ok(fn(*args, **kwargs))

    return wrapper


def optimistic(module: ModuleType) -> SimpleNamespace:
    """Okify every public function defined in a generated module."""
    return SimpleNamespace(
        **{
            name: okify(fn)
            for name, fn in vars(module).items()
            if not name.startswith('_')
            and inspect.isfunction(fn)
            and fn.__module__ == module.__name__
        }
    )


def _split_multipart(body: Mapping[str, Any]) -> tuple[dict[str, Any], dict[str, Any]]:
    data: dict[str, Any] = {}
    files: dict[str, Any] = {}
    for name, value in body.items():
        if value is None:
            continue
        if isinstance(value, (bytes, tuple)) or hasattr(value, 'read'):
            files[name] = value
        elif isinstance(value, dict):
            data[name] = json.dumps(value)
        else:
            data[name] = value
    return data, files


class Runtime:
    """Performs the requests of a generated module.

    Args:
        defaults: The module's default options. The mapping is read on every
            request, so changes to it (``api.defaults['base_url'] = ...``)
            take effect immediately.
    """

    def __init__(self, defaults: RequestOpts):
        self.defaults = defaults

    def _request(self, url: str, req: RequestOpts | None) -> httpx.Response:
        opts: dict[str, Any] = {**self.defaults, **(req or {})}
        headers = {
            name: str(value)
            for name, value in {
                **(self.defaults.get('headers') or {}),
                **((req or {}).get('headers') or {}),
            }.items()
            if value is not None
        }
        kwargs: dict[str, Any] = {
            'method': opts.get('method', 'GET'),
            'url': join_url(opts.get('base_url'), url),
            'headers': headers,
        }
        if 'timeout' in opts:
            kwargs['timeout'] = opts['timeout']
        for key in ('content', 'data', 'files'):
            if opts.get(key) is not None:
                kwargs[key] = opts[key]
        body = opts.get('body')
        if body is not None and 'content' not in kwargs:
            if isinstance(body, (str, bytes)):
                kwargs['content'] = body
            else:
                kwargs['json'] = body

        logger.debug(f"{kwargs['method']} {kwargs['url']}")
        client = opts.get('client')
        if client is not None:
            return client.request(**kwargs)
        with httpx.Client() as client:
            return client.request(**kwargs)

    def fetch_text(self, url: str, req: RequestOpts | None = None) -> TextResponse:
        response = self._request(url, req)
        return {'status': response.status_code, 'data': response.text}

    def fetch_json(self, url: str, req: RequestOpts | None = None) -> ApiResponse:
        """Fetch ``url`` and decode the body as JSON if the server says it is.

        Bodies with another content type are returned as text; an empty body
        yields a response without ``data``.
        """
        req = req or {}
        response = self._request(
            url,
            {**req, 'headers': {'Accept': 'application/json', **(req.get('headers') or {})}},
        )
        result: ApiResponse = {'status': response.status_code}
        if not response.content:
            return result
        if 'json' in response.headers.get('content-type', '').lower():
            result['data'] = response.json()
        else:
            result['data'] = response.text
        return result

    def json(self, req: RequestOpts) -> RequestOpts:
        """Encode ``req['body']`` as a JSON request body."""
        opts = {k: v for k, v in req.items() if k != 'body'}
        if req.get('body') is not None:
            opts['content'] = json.dumps(strip_none(req['body']))
        opts['headers'] = {**(req.get('headers') or {}), 'Content-Type': 'application/json'}
        return opts

    def form(self, req: RequestOpts) -> RequestOpts:
        """Encode ``req['body']`` as ``application/x-www-form-urlencoded``."""
        opts = {k: v for k, v in req.items() if k != 'body'}
        if req.get('body') is not None:
            opts['content'] = query.form(strip_none(req['body']))
        opts['headers'] = {
            **(req.get('headers') or {}),
            'Content-Type': 'application/x-www-form-urlencoded',
        }
        return opts

    def multipart(self, req: RequestOpts) -> RequestOpts:
        """Send ``req['body']`` as ``multipart/form-data``.

        Bytes, ``(filename, content[, content_type])`` tuples and file objects
        become file parts, everything else a plain field. The content type
        header (with its boundary) is left to ``httpx``, which sends bodies
        without any file part url-encoded.
        """
        opts = {k: v for k, v in req.items() if k != 'body'}
        body = req.get('body')
        if body is not None:
            opts['data'], opts['files'] = _split_multipart(body)
        return opts

    def ok(self, response: Mapping[str, Any]) -> Any:
        return ok(response)
