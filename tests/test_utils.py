"""Tests for template loading and logging setup."""

import logging

import pytest
import requests
from rich.logging import RichHandler

from protoc_gen_txt import utils
from protoc_gen_txt.codegen.context import (
    ListPayload,
    NoPayload,
    SinglePayload,
    pack_payload,
)
from protoc_gen_txt.errors import TemplateLoadError
from protoc_gen_txt.logging_config import LOGGER_NAME, configure_logging, get_logger


class FakeResponse:
    def __init__(self, text="", status_code=200):
        self.text = text
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(response=self)


class TestTemplateLocations:
    """Tests for location helpers."""

    def test_is_url(self):
        assert utils.is_url("https://example.com/a.tmpl")
        assert utils.is_url("http://example.com/a.tmpl")
        assert not utils.is_url("templates/a.tmpl")
        assert not utils.is_url("file:///tmp/a.tmpl")

    def test_template_name(self):
        assert utils.template_name("dir/sub/a.tmpl") == "a.tmpl"
        assert utils.template_name("https://example.com/t/b.tmpl") == "b.tmpl"
        assert utils.template_name("a.tmpl") == "a.tmpl"


class TestLoadTemplate:
    """Tests for loading template sources."""

    def test_from_file(self, write_template):
        path = write_template("x.tmpl", "content")

        assert utils.load_template(path) == "content"

    def test_from_url(self, monkeypatch):
        calls = []

        def fake_get(url, timeout):
            calls.append((url, timeout))
            return FakeResponse("remote")

        monkeypatch.setattr(utils.requests, "get", fake_get)

        assert utils.load_template("https://example.com/r.tmpl", timeout=5) == "remote"
        assert calls == [("https://example.com/r.tmpl", 5)]

    def test_url_http_error(self, monkeypatch):
        monkeypatch.setattr(
            utils.requests, "get", lambda url, timeout: FakeResponse(status_code=404)
        )

        with pytest.raises(TemplateLoadError, match="HTTP error 404"):
            utils.load_template("https://example.com/missing.tmpl")

    @pytest.mark.parametrize(
        "exc,message",
        [
            (requests.exceptions.Timeout(), "request timeout"),
            (requests.exceptions.ConnectionError(), "connection error"),
            (requests.exceptions.RequestException("odd"), "request error"),
        ],
    )
    def test_url_failures(self, monkeypatch, exc, message):
        def fake_get(url, timeout):
            raise exc

        monkeypatch.setattr(utils.requests, "get", fake_get)

        with pytest.raises(TemplateLoadError, match=message):
            utils.load_template("https://example.com/t.tmpl")


class TestPayload:
    """Tests for argument packing."""

    def test_pack_payload(self):
        assert pack_payload(()) == NoPayload()
        assert pack_payload(("a",)) == SinglePayload("a")
        assert pack_payload(("a", 1)) == ListPayload(["a", 1])
        assert pack_payload(([1, 2],)).value == [1, 2]


class TestLogging:
    """Tests for logging setup."""

    def test_get_logger_namespace(self):
        assert get_logger("template").name == "protoc_gen_txt.template"
        assert get_logger("protoc_gen_txt.cli").name == "protoc_gen_txt.cli"

    def test_configure_logging_level_from_env(self, monkeypatch):
        logger = logging.getLogger(LOGGER_NAME)
        handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
        monkeypatch.setenv("PROTOC_GEN_TXT_LOG_LEVEL", "warning")
        try:
            configured = configure_logging()
            configure_logging()

            assert configured.level == logging.WARNING
            assert sum(isinstance(h, RichHandler) for h in configured.handlers) == 1
        finally:
            logger.handlers[:] = handlers
            logger.setLevel(level)
            logger.propagate = propagate
