# 消息构造 Message Builder

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union


@dataclass(frozen=True)
class ScriptPayload:
    """字符串载荷：broker 收到后在浏览器端作为脚本执行（放在 data.eval）"""
    source: str


@dataclass(frozen=True)
class DataPayload:
    """任意可 JSON 序列化的载荷：原样转发给订阅者（放在 data.data）"""
    value: Any


Payload = Union[ScriptPayload, DataPayload]


def as_payload(data: Any) -> Payload:
    """在调用边界把原始值归类一次：str -> ScriptPayload，其它 -> DataPayload。"""
    if isinstance(data, (ScriptPayload, DataPayload)):
        return data
    if isinstance(data, str):
        return ScriptPayload(data)
    return DataPayload(data)


def build_message(channel: str, data: Any, secret_token: Optional[str]) -> Dict[str, Any]:
    """
    构造发给 broker 的消息：
        {"channel": c,
         "data": {"channel": c, "eval": "..."} 或 {"channel": c, "data": ...},
         "ext": {"private_pub_token": secret_token}}
    内层 data 总是重复一次 channel；eval / data 二选一。
    """
    payload = as_payload(data)
    inner: Dict[str, Any] = {"channel": channel}
    if isinstance(payload, ScriptPayload):
        inner["eval"] = payload.source
    else:
        inner["data"] = payload.value
    return {
        "channel": channel,
        "data": inner,
        "ext": {"private_pub_token": secret_token},
    }
