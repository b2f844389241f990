import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from urllib.parse import parse_qs

import pytest

from private_pub.config import PrivatePubConfig

# 固定时钟：2023-11-14 22:13:20 UTC
FIXED_NOW = 1_700_000_000.0
FIXED_NOW_MS = 1_700_000_000_000


class _RecordingHandler(BaseHTTPRequestHandler):
    """记录收到的 POST（路径、Content-Type、表单），按 server.status 返回"""

    def do_POST(self):
        length = int(self.headers.get("Content-Length") or 0)
        body = self.rfile.read(length).decode("utf-8")
        self.server.received.append({
            "path": self.path,
            "content_type": self.headers.get("Content-Type", ""),
            "form": parse_qs(body),
        })
        self.send_response(self.server.status)
        self.send_header("Content-Length", "0")
        self.end_headers()

    def log_message(self, format, *args):
        pass


@pytest.fixture()
def broker_endpoint(monkeypatch):
    """本地 HTTP 服务，充当 broker 的发布入口"""
    # 本机地址不走代理
    monkeypatch.setenv("NO_PROXY", "127.0.0.1,localhost")
    monkeypatch.setenv("no_proxy", "127.0.0.1,localhost")
    server = ThreadingHTTPServer(("127.0.0.1", 0), _RecordingHandler)
    server.received = []
    server.status = 200
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    server.base_url = f"http://127.0.0.1:{server.server_address[1]}"
    yield server
    server.shutdown()
    server.server_close()
    thread.join(timeout=5)


@pytest.fixture()
def config():
    return PrivatePubConfig({
        "server": "http://localhost:9/faye",
        "secret_token": "abc",
        "signature_expiration": 60,
    })


@pytest.fixture()
def fixed_clock():
    return lambda: FIXED_NOW
