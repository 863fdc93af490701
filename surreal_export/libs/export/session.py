"""
HTTP Session

Builds the requests session used for the export. The session keeps the
library defaults: no retry adapter, no timeout, default redirect policy.
"""

import logging

import requests

from ..core.utils import disable_ssl_warnings

logger = logging.getLogger(__name__)


def create_session(skip_tls: bool = False) -> requests.Session:
    """
    Create a new requests session for the export endpoint

    Args:
        skip_tls: Skip TLS certificate verification

    Returns:
        requests.Session: Default-configured session
    """
    session = requests.Session()

    if skip_tls:
        session.verify = False
        disable_ssl_warnings()
        logger.debug("TLS verification disabled for export session")

    return session
