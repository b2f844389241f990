# ──────────────────────────────────────────────────────────────────────────────
# 模块用途：broker 侧的入站消息校验扩展（挂在 broker 的 extensions 里）
# 说明：
#   - /meta/subscribe：校验客户端带来的票据签名与是否过期；
#   - 其它 /meta/* 通道：放行；
#   - 普通通道（发布）：校验 ext.private_pub_token 是否等于 secret_token，通过后抹掉 token 再下发；
#   - 校验失败时写 message["error"]，由 broker 拒绝该消息。
# ──────────────────────────────────────────────────────────────────────────────
from __future__ import annotations

import hmac
from typing import Any, Callable, Dict, MutableMapping, Optional

from private_pub.commons.base_logger import BaseLogger
from private_pub.commons.normalizers import to_int_or_none

from .config import PrivatePubConfig
from .errors import ConfigurationError
from .signer import Signer

SUBSCRIBE_CHANNEL = "/meta/subscribe"
META_PREFIX = "/meta/"

INCORRECT_SIGNATURE = "Incorrect signature."
SIGNATURE_EXPIRED = "Signature has expired."
INCORRECT_TOKEN = "Incorrect token."


def _same(given: Any, expected: str) -> bool:
    """常量时间比较；非字符串一律视为不匹配"""
    if not isinstance(given, str):
        return False
    return hmac.compare_digest(given.encode("utf-8"), expected.encode("utf-8"))


class SubscriptionGuard:
    """入站消息校验：incoming(message, callback)，处理完后一定会调用 callback(message)。"""

    def __init__(self, config: PrivatePubConfig, signer: Signer, *, logger: Optional[BaseLogger] = None):
        self.config = config
        self.signer = signer
        self.logger = logger or BaseLogger(name="private_pub.guard")

    def incoming(self, message: MutableMapping[str, Any], callback: Callable[[MutableMapping[str, Any]], Any]) -> Any:
        channel = message.get("channel") or ""
        if channel == SUBSCRIBE_CHANNEL:
            self.authenticate_subscribe(message)
        elif not channel.startswith(META_PREFIX):
            self.authenticate_publish(message)
        return callback(message)

    def authenticate_subscribe(self, message: MutableMapping[str, Any]) -> None:
        ext = self._ext(message)
        timestamp = ext.get("private_pub_timestamp")
        expected = self.signer.signature_for(message.get("subscription"), timestamp)
        given = ext.get("private_pub_signature")

        if not _same(given, expected):
            message["error"] = INCORRECT_SIGNATURE
        elif self.signer.is_expired(to_int_or_none(timestamp) or 0):
            message["error"] = SIGNATURE_EXPIRED

        if "error" in message:
            self.logger.log_warning(
                f"subscribe rejected | client={message.get('clientId')} "
                f"subscription={message.get('subscription')} reason={message['error']}"
            )

    def authenticate_publish(self, message: MutableMapping[str, Any]) -> None:
        secret = self.config.secret_token
        if secret is None:
            raise ConfigurationError("No secret_token config set, ensure private_pub.yml is loaded properly.")

        ext = self._ext(message)
        token = ext.get("private_pub_token")
        if not _same(token, str(secret)):
            message["error"] = INCORRECT_TOKEN
            self.logger.log_warning(f"publish rejected | channel={message.get('channel')} reason={INCORRECT_TOKEN}")
        else:
            # 不把 token 下发给订阅者
            ext["private_pub_token"] = None

    @staticmethod
    def _ext(message: MutableMapping[str, Any]) -> Dict[str, Any]:
        ext = message.get("ext")
        if not isinstance(ext, dict):
            ext = {}
            message["ext"] = ext
        return ext
