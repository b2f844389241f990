import pytest

from private_pub.message import DataPayload, ScriptPayload, as_payload, build_message


@pytest.mark.parametrize("payload", [
    "alert('hi');",
    "",
    "$('#chat').append('<li>hello</li>');",
])
def test_string_payload_goes_to_eval(payload):
    msg = build_message("/messages/new", payload, "token")
    assert msg["data"]["eval"] == payload
    assert "data" not in msg["data"]


@pytest.mark.parametrize("payload", [
    {"username": "bob", "msg": "hi"},
    [1, 2, 3],
    42,
    None,
    True,
])
def test_non_string_payload_goes_to_data(payload):
    msg = build_message("/messages/new", payload, "token")
    assert msg["data"]["data"] == payload
    assert "eval" not in msg["data"]


def test_channel_is_echoed_in_inner_payload():
    msg = build_message("/foo", {"a": 1}, "token")
    assert msg["channel"] == "/foo" == msg["data"]["channel"]


def test_ext_carries_secret_token():
    assert build_message("/foo", 1, "s3cret")["ext"] == {"private_pub_token": "s3cret"}
    assert build_message("/foo", 1, None)["ext"] == {"private_pub_token": None}


def test_explicit_payloads_bypass_type_check():
    # 字符串也可以显式作为数据下发
    msg = build_message("/foo", DataPayload("plain text"), "t")
    assert msg["data"] == {"channel": "/foo", "data": "plain text"}

    msg = build_message("/foo", ScriptPayload("run()"), "t")
    assert msg["data"] == {"channel": "/foo", "eval": "run()"}


def test_as_payload_resolution():
    assert as_payload("x") == ScriptPayload("x")
    assert as_payload({"x": 1}) == DataPayload({"x": 1})
    tagged = DataPayload([1])
    assert as_payload(tagged) is tagged
