"""Tests for HTTP page retrieval against an in-process transport."""

from __future__ import annotations

import threading
import unittest

import httpx

from pori.errors import FetchCancelled, RetrievalFailure
from pori.services.retrieval import HttpPageRetriever
from pori.services.urls import minimize_url, normalize_location


class HttpPageRetrieverTests(unittest.TestCase):
    def _retriever(self, handler, **kwargs) -> HttpPageRetriever:
        return HttpPageRetriever(transport=httpx.MockTransport(handler), **kwargs)

    def test_returns_page_text_and_assumes_https_for_bare_host(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, text="<html>hi</html>")

        body = self._retriever(handler).retrieve("news.example/top", threading.Event())

        self.assertEqual(body, "<html>hi</html>")
        self.assertEqual(str(seen[0].url), "https://news.example/top")
        self.assertIn("pori", seen[0].headers["user-agent"])

    def test_decodes_using_declared_charset(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                content="café".encode("latin-1"),
                headers={"content-type": "text/html; charset=latin-1"},
            )

        self.assertEqual(self._retriever(handler).retrieve("x.example", threading.Event()), "café")

    def test_http_error_status_becomes_retrieval_failure(self) -> None:
        retriever = self._retriever(lambda request: httpx.Response(503))
        with self.assertRaises(RetrievalFailure) as ctx:
            retriever.retrieve("https://x.example/", threading.Event())
        self.assertEqual(ctx.exception.message, "HTTP 503 from https://x.example/")
        self.assertEqual(ctx.exception.location, "https://x.example/")

    def test_network_error_becomes_retrieval_failure(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with self.assertRaises(RetrievalFailure) as ctx:
            self._retriever(handler).retrieve("x.example", threading.Event())
        self.assertIn("connection refused", ctx.exception.message)

    def test_body_is_capped_at_max_bytes(self) -> None:
        retriever = self._retriever(lambda request: httpx.Response(200, content=b"a" * 100), max_bytes=10)
        self.assertEqual(retriever.retrieve("x.example", threading.Event()), "a" * 10)

    def test_cancelled_token_stops_before_request(self) -> None:
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200)

        cancel = threading.Event()
        cancel.set()
        with self.assertRaises(FetchCancelled):
            self._retriever(handler).retrieve("x.example", cancel)
        self.assertEqual(calls, [])

    def test_empty_location_is_rejected(self) -> None:
        with self.assertRaises(RetrievalFailure):
            self._retriever(lambda request: httpx.Response(200)).retrieve("  ", threading.Event())


class UrlHelperTests(unittest.TestCase):
    def test_normalize_location(self) -> None:
        self.assertEqual(normalize_location("http://a.example/x"), "http://a.example/x")
        self.assertEqual(normalize_location(" a.example "), "https://a.example")
        self.assertEqual(normalize_location("//a.example"), "https://a.example")
        self.assertEqual(normalize_location(""), "")

    def test_minimize_url_keeps_host_only(self) -> None:
        self.assertEqual(minimize_url("https://news.ycombinator.com/item?id=1"), "news.ycombinator.com")
        self.assertEqual(minimize_url("https://a.example"), "a.example")
        self.assertEqual(minimize_url("a.example"), "a.example")


if __name__ == "__main__":
    unittest.main()
