import json

import requests

from parcel_pk import Carrier, Tracker


def make_response(body, status_code: int = 200, url: str = "") -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    response.url = url
    response.encoding = "utf-8"
    if not isinstance(body, (str, bytes)):
        body = json.dumps(body)
    response._content = body.encode() if isinstance(body, str) else body
    return response


class FakeSession(requests.Session):
    """`requests.Session` that answers every request with a canned response"""

    def __init__(self, body=None, status_code: int = 200, exc: Exception | None = None):
        super().__init__()
        self.body = body
        self.status_code = status_code
        self.exc = exc
        self.sent = []

    def send(self, request, **kwargs):
        self.sent.append((request, kwargs))
        if self.exc is not None:
            raise self.exc
        return make_response(self.body, self.status_code, request.url)


class StubTracker(Tracker):
    carrier = Carrier.Speedaf
    name = "Stub"

    def __init__(self, *results):
        self.results = list(results)
        self.calls = []

    def fetch(self, tracking_number):
        self.calls.append(tracking_number)
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result
