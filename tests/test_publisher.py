import json
import socket

import pytest
import requests

from private_pub.config import PrivatePubConfig
from private_pub.errors import BrokerResponseError, ConfigurationError, TransportError
from private_pub.message import build_message
from private_pub.publisher import Publisher


class FakeSession:
    """记录 post 调用，不发真实请求"""

    def __init__(self, status_code=200):
        self.calls = []
        self.status_code = status_code
        self.closed = False

    def post(self, url, data=None, timeout=None):
        self.calls.append({"url": url, "data": data, "timeout": timeout})
        resp = requests.Response()
        resp.status_code = self.status_code
        resp.url = url
        return resp

    def close(self):
        self.closed = True


def _closed_port():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


def test_publish_without_server_raises():
    publisher = Publisher(PrivatePubConfig({"secret_token": "abc"}), session=FakeSession())
    with pytest.raises(ConfigurationError, match="No server specified"):
        publisher.publish_to("/foo", {"a": 1})
    assert publisher.session.calls == []


def test_publish_with_invalid_server_raises():
    publisher = Publisher(PrivatePubConfig({"server": "localhost"}), session=FakeSession())
    with pytest.raises(ConfigurationError):
        publisher.publish_message(build_message("/foo", 1, None))


def test_endpoint_receives_message_form_field(broker_endpoint):
    cfg = PrivatePubConfig({"server": broker_endpoint.base_url + "/faye", "secret_token": "abc"})
    with Publisher(cfg) as publisher:
        resp = publisher.publish_to("/messages/new", {"text": "你好", "n": 1})

    assert resp.status_code == 200
    assert len(broker_endpoint.received) == 1
    req = broker_endpoint.received[0]
    assert req["path"] == "/faye"
    assert req["content_type"].startswith("application/x-www-form-urlencoded")
    assert json.loads(req["form"]["message"][0]) == build_message("/messages/new", {"text": "你好", "n": 1}, "abc")


def test_server_without_path_posts_to_root(broker_endpoint):
    cfg = PrivatePubConfig({"server": broker_endpoint.base_url})
    Publisher(cfg).publish_to("/foo", "alert(1)")
    req = broker_endpoint.received[0]
    assert req["path"] == "/"
    assert json.loads(req["form"]["message"][0])["data"] == {"channel": "/foo", "eval": "alert(1)"}


def test_bad_status_is_returned_by_default(broker_endpoint):
    broker_endpoint.status = 500
    resp = Publisher(PrivatePubConfig({"server": broker_endpoint.base_url})).publish_to("/foo", 1)
    assert resp.status_code == 500


def test_bad_status_raises_when_checking(broker_endpoint):
    broker_endpoint.status = 403
    publisher = Publisher(PrivatePubConfig({"server": broker_endpoint.base_url}), check_status=True)
    with pytest.raises(BrokerResponseError) as exc:
        publisher.publish_to("/foo", 1)
    assert exc.value.status_code == 403
    assert isinstance(exc.value, TransportError)


def test_connection_failure_raises_transport_error():
    cfg = PrivatePubConfig({"server": f"http://127.0.0.1:{_closed_port()}/faye"})
    with pytest.raises(TransportError) as exc:
        Publisher(cfg, timeout=2).publish_to("/foo", 1)
    assert isinstance(exc.value.__cause__, requests.RequestException)


def test_https_server_keeps_scheme_and_port():
    session = FakeSession()
    cfg = PrivatePubConfig({"server": "https://push.example.com:8443/faye?x=1"})
    Publisher(cfg, session=session).publish_to("/foo", 1)
    assert session.calls[0]["url"] == "https://push.example.com:8443/faye"


def test_message_is_compact_json():
    session = FakeSession()
    Publisher(PrivatePubConfig({"server": "http://x/faye", "secret_token": "t"}), session=session).publish_to("/c", [1, 2])
    assert session.calls[0]["data"] == {
        "message": '{"channel":"/c","data":{"channel":"/c","data":[1,2]},"ext":{"private_pub_token":"t"}}'
    }


@pytest.mark.parametrize("ctor_timeout,cfg_timeout,expected", [
    (None, None, (5.0, 15.0)),
    (None, 3, 3.0),
    (1.5, 3, 1.5),
])
def test_timeout_resolution(ctor_timeout, cfg_timeout, expected):
    session = FakeSession()
    values = {"server": "http://x"}
    if cfg_timeout is not None:
        values["publish_timeout"] = cfg_timeout
    Publisher(PrivatePubConfig(values), session=session, timeout=ctor_timeout).publish_to("/c", 1)
    assert session.calls[0]["timeout"] == expected


def test_close_leaves_external_session_open():
    session = FakeSession()
    with Publisher(PrivatePubConfig({"server": "http://x"}), session=session):
        pass
    assert session.closed is False
