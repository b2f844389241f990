# ──────────────────────────────────────────────────────────────────────────────
# 模块用途：PrivatePub 门面，把 config / signer / publisher / status / hooks / guard 组装在一起
# 说明：
#   - 所有组件共享同一个 PrivatePubConfig 引用；
#   - reset_config() 调用 config.reset()，组件持有的仍是同一个配置对象，无需重建；
#   - 包级 private_pub.publish_to(...) 等函数转发到一个进程级默认实例。
# ──────────────────────────────────────────────────────────────────────────────
from __future__ import annotations

import time
from typing import Any, Callable, Dict, List, Mapping, Optional

from requests import Response, Session

from .config import ConfigSource, PrivatePubConfig
from .guard import SubscriptionGuard
from .hooks import BrokerAdapter, LifecycleHooks, broker_app
from .message import build_message
from .publisher import Publisher, Timeout
from .signer import Signer
from .status import StatusLogger


class PrivatePub:
    """服务端使用的入口：发布消息、签发订阅票据、构造 broker。"""

    def __init__(
        self,
        config: Optional[PrivatePubConfig] = None,
        *,
        session: Optional[Session] = None,
        timeout: Optional[Timeout] = None,
        check_status: bool = False,
        strict_signing: bool = False,
        clock: Callable[[], float] = time.time,
    ):
        # 空配置的 len() 为 0，不能用 `config or ...`
        self.config = config if config is not None else PrivatePubConfig()
        self.signer = Signer(self.config, clock=clock, strict=strict_signing)
        self.publisher = Publisher(self.config, session=session, timeout=timeout, check_status=check_status)
        self.status = StatusLogger(self.config)
        self.hooks = LifecycleHooks(self.status)
        self.guard = SubscriptionGuard(self.config, self.signer)

    # ------------------ 配置 ------------------

    def reset_config(self) -> None:
        self.config.reset()

    def load_config(self, source: ConfigSource, environment: Any) -> None:
        self.config.load(source, environment)

    # ------------------ 发布 ------------------

    def message(self, channel: str, data: Any) -> Dict[str, Any]:
        return build_message(channel, data, self.config.secret_token)

    def publish_to(self, channel: str, data: Any) -> Response:
        return self.publisher.publish_to(channel, data)

    def publish_message(self, message: Mapping[str, Any]) -> Response:
        return self.publisher.publish_message(message)

    # ------------------ 订阅票据 ------------------

    def subscription(self, options: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> Dict[str, Any]:
        return self.signer.sign(options, **kwargs)

    def signature_expired(self, timestamp: int) -> Optional[bool]:
        return self.signer.is_expired(timestamp)

    # ------------------ broker ------------------

    def log_status(self, message: str) -> Optional[bool]:
        return self.status.log(message)

    def broker_app(
        self,
        broker_factory: Callable[..., BrokerAdapter],
        options: Optional[Mapping[str, Any]] = None,
    ) -> BrokerAdapter:
        """默认 extensions 为本实例的 SubscriptionGuard"""
        extensions: List[Any] = [self.guard]
        return broker_app(broker_factory, options, hooks=self.hooks, extensions=extensions)

    def close(self) -> None:
        self.publisher.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
