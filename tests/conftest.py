from __future__ import annotations

import json
import os
import socket
import threading
from collections.abc import Iterator
from datetime import datetime, timedelta, timezone
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path

import pytest

from awsbase import config as awsbase_config
from awsbase.config import EnvConfig

IMDS_ROLE_NAME = "test-role"
IMDS_TOKEN = "imds-session-token"


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    # Credentials must never leak in from the machine running the tests.
    for key in list(os.environ):
        if key.startswith("AWS_") or key.lower() in {"http_proxy", "https_proxy", "all_proxy"}:
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("NO_PROXY", "127.0.0.1,localhost")
    monkeypatch.setattr(awsbase_config, "load_dotenv", lambda *_, **__: None)
    awsbase_config._load_settings_cached.cache_clear()
    yield
    awsbase_config._load_settings_cached.cache_clear()


@pytest.fixture
def empty_env(tmp_path: Path) -> EnvConfig:
    """An environment with no credentials whose shared files do not exist."""
    return EnvConfig(
        shared_credentials_file=str(tmp_path / "missing-credentials"),
        shared_config_file=str(tmp_path / "missing-config"),
    )


def _imds_routes() -> dict[str, str]:
    expiration = (datetime.now(timezone.utc) + timedelta(hours=6)).strftime("%Y-%m-%dT%H:%M:%SZ")
    credentials = {
        "Code": "Success",
        "LastUpdated": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
        "Type": "AWS-HMAC",
        "AccessKeyId": "Ec2MetadataAccessKey",
        "SecretAccessKey": "Ec2MetadataSecretKey",
        "Token": "Ec2MetadataSessionToken",
        "Expiration": expiration,
    }
    return {
        "/latest/meta-data/iam/security-credentials/": IMDS_ROLE_NAME,
        f"/latest/meta-data/iam/security-credentials/{IMDS_ROLE_NAME}": json.dumps(credentials),
        "/latest/meta-data/instance-id": "i-1234567890abcdef0",
    }


class _ImdsHandler(BaseHTTPRequestHandler):
    routes: dict[str, str] = {}

    def _reply(self, status: int, body: str) -> None:
        payload = body.encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "text/plain")
        self.send_header("Content-Length", str(len(payload)))
        self.end_headers()
        self.wfile.write(payload)

    def do_PUT(self) -> None:  # noqa: N802
        if self.path == "/latest/api/token":
            self._reply(200, IMDS_TOKEN)
        else:
            self._reply(404, "")

    def do_GET(self) -> None:  # noqa: N802
        body = self.routes.get(self.path)
        if body is None:
            self._reply(404, "")
        else:
            self._reply(200, body)

    def log_message(self, format: str, *args: object) -> None:  # noqa: A002
        return


@pytest.fixture
def imds_endpoint() -> Iterator[str]:
    """Base URL of a local fake EC2 instance metadata service."""
    handler = type("ImdsHandler", (_ImdsHandler,), {"routes": _imds_routes()})
    server = ThreadingHTTPServer(("127.0.0.1", 0), handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield f"http://127.0.0.1:{server.server_address[1]}/"
    finally:
        server.shutdown()
        server.server_close()
        thread.join(timeout=5)


@pytest.fixture
def invalid_imds_endpoint() -> str:
    """URL of a local port nothing is listening on."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        port = sock.getsockname()[1]
    return f"http://127.0.0.1:{port}/"

