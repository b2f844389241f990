# ──────────────────────────────────────────────────────────────────────────────
# 模块用途：订阅票据（subscription ticket）的签名与过期判断
# 说明：
#   - signature = sha1_hex(secret_token + channel + timestamp)，三者按字符串拼接，None 视为空串；
#   - timestamp 为毫秒，在生成票据时取当前时间；
#   - is_expired 是三值结果：True / False / None（未配置 signature_expiration，永不过期）。
# ──────────────────────────────────────────────────────────────────────────────
from __future__ import annotations

import hashlib
import time
from typing import Any, Callable, Dict, Mapping, Optional

from private_pub.commons.base_logger import BaseLogger

from .config import PrivatePubConfig
from .errors import ConfigurationError


def _as_text(value: Any) -> str:
    return "" if value is None else str(value)


def now_ms(clock: Callable[[], float] = time.time) -> int:
    """当前时间（毫秒，四舍五入）"""
    return round(clock() * 1000)


class Signer:
    """
    生成并校验订阅票据。

    strict=False（默认）时，缺少 secret_token / channel 仍会签名（对空串签名），只打一条 warning；
    strict=True 时直接抛错。
    """

    def __init__(
        self,
        config: PrivatePubConfig,
        *,
        clock: Callable[[], float] = time.time,
        strict: bool = False,
        logger: Optional[BaseLogger] = None,
    ):
        self.config = config
        self.clock = clock
        self.strict = strict
        self.logger = logger or BaseLogger(name="private_pub.signer")

    def signature_for(self, channel: Any, timestamp: Any) -> str:
        """按 secret_token、channel、timestamp 的顺序拼接后做 SHA-1，返回 40 位十六进制。"""
        raw = "".join(_as_text(v) for v in (self.config.secret_token, channel, timestamp))
        return hashlib.sha1(raw.encode("utf-8")).hexdigest()

    def sign(self, options: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> Dict[str, Any]:
        """
        生成订阅票据：{server, timestamp, **options, signature}
        options 中的键会覆盖 server / timestamp（例如校验时传入客户端带来的 timestamp）。
        """
        ticket: Dict[str, Any] = {"server": self.config.server, "timestamp": now_ms(self.clock)}
        if options:
            ticket.update(options)
        ticket.update(kwargs)

        self._check_inputs(ticket.get("channel"))
        ticket["signature"] = self.signature_for(ticket.get("channel"), ticket["timestamp"])
        return ticket

    def is_expired(self, timestamp: int) -> Optional[bool]:
        """
        票据时间戳（毫秒）是否早于 now - signature_expiration。
        未配置 signature_expiration 时返回 None，调用方应视为永不过期。
        """
        expiration = self.config.signature_expiration
        if expiration is None:
            return None
        return timestamp < round((self.clock() - expiration) * 1000)

    def _check_inputs(self, channel: Any) -> None:
        if self.config.secret_token is None:
            if self.strict:
                raise ConfigurationError("No secret_token config set, ensure private_pub.yml is loaded properly.")
            self.logger.log_warning("signing without secret_token, ticket signature is not secret")
        if channel is None or channel == "":
            if self.strict:
                raise ValueError("subscription requires a channel")
            self.logger.log_warning("signing without channel, ticket does not authorize any channel")
