"""
HTTP session with connection pooling and the certifi CA bundle.

Webhook delivery is best effort: the adapter never retries a failed
connect, read or status. Redirects are still followed.
"""

import os

import certifi
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

_retry_strategy = Retry(
    connect=0,
    read=0,
    status=0,
    other=0,
    redirect=5,
    raise_on_status=False,
)


def _get_ca_bundle():
    """Get the CA bundle path.

    Priority: env var → certifi.
    """
    env_ca = os.environ.get('REQUESTS_CA_BUNDLE') or os.environ.get('SSL_CERT_FILE')
    if env_ca and os.path.isfile(env_ca):
        return env_ca
    return certifi.where()


def create_session():
    """Create a requests.Session shared by every trigger's dispatch call."""
    session = requests.Session()
    adapter = HTTPAdapter(
        pool_connections=3,
        pool_maxsize=4,
        max_retries=_retry_strategy,
    )
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    session.verify = _get_ca_bundle()
    return session

