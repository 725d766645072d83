import asyncio
import collections
import logging

import requests


log = logging.getLogger(__name__)


TransportResponse = collections.namedtuple(
    "TransportResponse", ["error", "status_code", "body"]
)


class RequestsTransport(object):
    """
    POSTs JSON to Apple with requests.

    The defaults (headers, timeout, proxies, verify, cert) are read once, when
    the transport is built. Each call runs in a worker thread with its own
    Session built from them, since a Session is not safe to share between
    threads. Request and decoding errors are returned in
    ``TransportResponse.error`` instead of raised.
    """

    def __init__(self, request_defaults=None):
        request_defaults = dict(request_defaults or {})

        self.timeout = request_defaults.get("timeout")
        self.headers = dict(request_defaults.get("headers") or {})
        self.proxies = dict(request_defaults.get("proxies") or {})
        self.verify = request_defaults.get("verify", True)
        self.cert = request_defaults.get("cert")

    def make_session(self):
        session = requests.Session()
        session.headers.update(self.headers)
        session.proxies.update(self.proxies)
        session.verify = self.verify
        session.cert = self.cert
        return session

    def _post(self, url, json_body, encoding=None):
        with self.make_session() as session:
            try:
                r = session.post(url, json=json_body, timeout=self.timeout)
            except requests.RequestException as exc:
                return TransportResponse(exc, None, None)

        if encoding:
            r.encoding = encoding

        try:
            body = r.json()
        except ValueError as exc:
            log.info(
                "Unable to decode the response from {} ({})".format(url, r.status_code)
            )
            return TransportResponse(exc, r.status_code, None)

        return TransportResponse(None, r.status_code, body)

    async def post(self, url, json_body, encoding=None):
        return await asyncio.to_thread(self._post, url, json_body, encoding)
