"""
Integration tests for the development server: proxying and build plugins.
"""

from __future__ import annotations

import logging
from pathlib import Path

import httpx
import pytest
from fastapi.testclient import TestClient

from elemental.backend.core.utils.config import ConfigError
from elemental.backend.schemas import DevServerSettings, ProxyRuleIn
from elemental.frontend.devserver import PLUGINS, create_app


class TestProxying:
    def test_api_request_forwarded(self, dev_client: TestClient, upstream) -> None:
        response = dev_client.get("/api/health")

        assert response.status_code == 200
        assert response.text == "upstream ok"
        assert len(upstream.requests) == 1
        forwarded = upstream.requests[0]
        assert str(forwarded.url) == "http://localhost:3000/api/health"
        assert forwarded.headers["host"] == "localhost:3000"

    def test_method_query_and_body_forwarded(self, dev_client: TestClient, upstream) -> None:
        dev_client.post("/api/elements?period=2", content=b'{"symbol": "N"}')

        forwarded = upstream.requests[0]
        assert forwarded.method == "POST"
        assert forwarded.url.path == "/api/elements"
        assert forwarded.url.query == b"period=2"
        assert forwarded.content == b'{"symbol": "N"}'

    def test_upstream_status_relayed(self, dev_client: TestClient, upstream) -> None:
        upstream.status_code = 404
        upstream.body = b"Cannot GET /api/missing"
        response = dev_client.get("/api/missing")
        assert response.status_code == 404
        assert response.text == "Cannot GET /api/missing"

    def test_redirects_relayed_not_followed(self, dev_client: TestClient, upstream) -> None:
        upstream.status_code = 302
        upstream.headers = {"location": "http://localhost:3000/api/next"}
        response = dev_client.get("/api/old", follow_redirects=False)
        assert response.status_code == 302
        assert response.headers["location"] == "http://localhost:3000/api/next"
        assert len(upstream.requests) == 1

    def test_unmatched_path_not_forwarded(self, dev_client: TestClient, upstream) -> None:
        response = dev_client.get("/about")
        assert response.status_code == 404
        assert upstream.requests == []

    def test_unreachable_target(self, devserver_settings: DevServerSettings) -> None:
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        app = create_app(devserver_settings, transport=httpx.MockTransport(refuse))
        with TestClient(app) as client:
            response = client.get("/api/health")
        assert response.status_code == 500

    def test_no_rules(self, tmp_path: Path, upstream) -> None:
        settings = DevServerSettings(build_dir=str(tmp_path), proxy=[])
        with TestClient(create_app(settings, transport=upstream.transport)) as client:
            assert client.get("/api/health").status_code == 404
        assert upstream.requests == []

    def test_regex_rule(self, tmp_path: Path, upstream) -> None:
        settings = DevServerSettings(
            build_dir=str(tmp_path / "build"),
            proxy=[ProxyRuleIn(context=r"^/auth/", target="http://localhost:3000")],
        )
        with TestClient(create_app(settings, transport=upstream.transport)) as client:
            client.get("/auth/login")
        assert str(upstream.requests[0].url) == "http://localhost:3000/auth/login"


class TestPlugins:
    def test_sveltekit_is_registered(self) -> None:
        assert "sveltekit" in PLUGINS

    def test_unknown_plugin(self, devserver_settings: DevServerSettings) -> None:
        settings = devserver_settings.model_copy(update={"plugins": ["sveltekit", "react"]})
        with pytest.raises(ConfigError, match="react"):
            create_app(settings)

    def test_serves_build_output(self, tmp_path: Path, upstream) -> None:
        build = tmp_path / "build"
        build.mkdir()
        (build / "index.html").write_text("<h1 class='text-oxygen'>Elements</h1>")

        settings = DevServerSettings(build_dir=str(build))
        with TestClient(create_app(settings, transport=upstream.transport)) as client:
            page = client.get("/")
            api = client.get("/api/health")

        assert page.status_code == 200
        assert "Elements" in page.text
        # Proxy rules take precedence over the static mount
        assert api.text == "upstream ok"

    def test_missing_build_output_falls_back_to_404(self, dev_client: TestClient) -> None:
        assert dev_client.get("/").status_code == 404


class TestRawForwarding:
    def test_encoded_path_forwarded_verbatim(self, dev_client: TestClient, upstream) -> None:
        dev_client.get("/api/files/a%3Fb%2Fc%23d")

        forwarded = upstream.requests[0]
        assert forwarded.url.raw_path == b"/api/files/a%3Fb%2Fc%23d"
        assert forwarded.url.query == b""

    def test_encoded_query_forwarded_verbatim(self, dev_client: TestClient, upstream) -> None:
        dev_client.get("/api/search?q=a%26b&tag=%2Fx")

        forwarded = upstream.requests[0]
        assert forwarded.url.raw_path == b"/api/search?q=a%26b&tag=%2Fx"

    def test_regex_sees_encoded_path(self, tmp_path: Path, upstream) -> None:
        settings = DevServerSettings(
            build_dir=str(tmp_path / "build"),
            proxy=[ProxyRuleIn(context=r"^/api/[^/?]+$", target="http://localhost:3000")],
        )
        with TestClient(create_app(settings, transport=upstream.transport)) as client:
            proxied = client.get("/api/a%2Fb")
            skipped = client.get("/api/a/b")

        assert proxied.status_code == 200
        assert skipped.status_code == 404
        assert [r.url.raw_path for r in upstream.requests] == [b"/api/a%2Fb"]


class TestStartupWarnings:
    def test_missing_build_warned_at_startup_only(
        self,
        devserver_settings: DevServerSettings,
        upstream,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        caplog.set_level(logging.WARNING, logger="elemental.frontend.devserver")
        app = create_app(devserver_settings, transport=upstream.transport)
        assert "SvelteKit build output not found" not in caplog.text

        with TestClient(app):
            pass
        assert "SvelteKit build output not found" in caplog.text
