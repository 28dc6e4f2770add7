"""
network functions utilities for noderegression.
"""

import asyncio
import functools
from contextlib import contextmanager

import redo
import requests

from noderegression.errors import HttpResponseError


def retry_get(url, session=None, **kwargs):
    """
    More robust `requests.get` equivalent function.

    This is equivalent to the requests.get function, except that
    it will retry the requests call three times in case of HTTPError or
    ConnectionError.
    """
    return redo.retry(
        (session or requests).get,
        attempts=3,
        sleeptime=1,
        retry_exceptions=(
            requests.exceptions.HTTPError,
            requests.exceptions.ConnectionError,
        ),
        args=(url,),
        kwargs=kwargs,
    )


def check_response(response):
    """
    Raise :class:`HttpResponseError` unless *response* has a 2xx status.
    """
    if not 200 <= response.status_code < 300:
        response.close()
        raise HttpResponseError.from_response(response)
    return response


async def async_get(url, session=None, **kwargs):
    """
    Run :func:`retry_get` in the default executor and check the status.
    """
    loop = asyncio.get_running_loop()
    response = await loop.run_in_executor(
        None, functools.partial(retry_get, url, session=session, **kwargs)
    )
    return check_response(response)


def create_session(get_defaults=None):
    """
    Returns a new requests session, which keeps connections alive.

    :param get_defaults: if defined, it must be a dict that will provide
        default values for calls to session.get (e.g. a timeout).
    """
    session = requests.Session()
    if get_defaults:
        _get = session.get

        def _default_get(*args, **kwargs):
            for k, v in get_defaults.items():
                kwargs.setdefault(k, v)
            return _get(*args, **kwargs)

        session.get = _default_get
    return session


@contextmanager
def http_session(session=None, get_defaults=None):
    """
    Context manager giving the session to use for one bisection.

    A session given by the caller is used as-is and left open; otherwise a
    new one is created and closed on exit.
    """
    if session is not None:
        yield session
        return
    session = create_session(get_defaults=get_defaults)
    try:
        yield session
    finally:
        session.close()
