"""
Cross-origin support.

The front end is a static site that may be served from a different origin
than the API, so every endpoint allows cross-origin calls and answers an
OPTIONS request with an empty 200.

Two kinds of OPTIONS request reach the API:
  - Real browser pre-flights (Origin + Access-Control-Request-Method).
    CORSMiddleware answers these before routing; the subclass below only
    drops Starlette's plain-text "OK" body so the response is empty.
  - Bare OPTIONS without CORS headers. These pass through the middleware
    untouched and are answered by the preflight() route registered next
    to each endpoint.
"""

from fastapi import Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.datastructures import Headers


class EmptyPreflightCORSMiddleware(CORSMiddleware):
    """CORSMiddleware whose pre-flight responses carry no body."""

    def preflight_response(self, request_headers: Headers) -> Response:
        response = super().preflight_response(request_headers)
        headers = {
            key: value
            for key, value in response.headers.items()
            if key.lower() not in ("content-length", "content-type")
        }
        return Response(status_code=response.status_code, headers=headers)


async def preflight() -> Response:
    """Empty 200 for a bare OPTIONS request."""
    return Response(status_code=200)
