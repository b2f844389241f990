# ──────────────────────────────────────────────────────────────────────────────
# 模块用途：private_pub 的异常类型
#   PrivatePubError
#     ├── ConfigurationError   配置缺失 / 环境块不存在 / 配置格式不对
#     └── TransportError       发布时网络层失败
#           └── BrokerResponseError   开启状态码检查时，broker 返回非 2xx
# ──────────────────────────────────────────────────────────────────────────────
from __future__ import annotations

from typing import Any, Optional


class PrivatePubError(Exception):
    """private_pub 所有异常的基类"""


class ConfigurationError(PrivatePubError, ValueError):
    """使用时发现必需的配置项缺失（例如没有 server）"""


class TransportError(PrivatePubError):
    """向 broker 发送 POST 时的连接 / 超时等网络错误"""


class BrokerResponseError(TransportError):
    """broker 返回了非 2xx 状态码（仅在 check_status=True 时抛出）"""

    def __init__(self, message: str, response: Optional[Any] = None):
        super().__init__(message)
        self.response = response

    @property
    def status_code(self) -> Optional[int]:
        return getattr(self.response, "status_code", None)
