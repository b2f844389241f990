# private_pub/publisher.py
from __future__ import annotations

import json
from typing import Any, Dict, Mapping, Optional

import requests
from requests import Response, Session
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from private_pub.commons.base_logger import BaseLogger
from private_pub.tools.request_utils import endpoint_url, is_secure

from .config import PrivatePubConfig
from .errors import BrokerResponseError, ConfigurationError, TransportError
from .message import build_message

Timeout = float | tuple[float, float]


class Publisher:
    """
    把消息发布到 broker 的 HTTP 入口：
    - 每次 publish 同步 POST 一次，表单字段 message=<JSON>
    - 不重试（至多一次），网络错误包装为 TransportError 抛给调用方
    - 默认不检查状态码，返回 Response 交给调用方；check_status=True 时非 2xx 抛 BrokerResponseError
    """

    # connect / read 超时（秒），配置项 publish_timeout 可覆盖
    DEFAULT_TIMEOUT: Timeout = (5.0, 15.0)

    def __init__(
        self,
        config: PrivatePubConfig,
        *,
        session: Optional[Session] = None,
        timeout: Optional[Timeout] = None,
        check_status: bool = False,
        logger: Optional[BaseLogger] = None,
    ):
        self.config = config
        self.timeout = timeout
        self.check_status = bool(check_status)
        self.logger = logger or BaseLogger(name="private_pub.publisher")
        self._own_session = session is None
        self.session: Session = session if session is not None else self._create_session()

    # --------------------- Session ---------------------

    def _create_session(self) -> Session:
        """创建不带重试的 Session（publish 是 at-most-once）。"""
        s = requests.Session()
        adapter = HTTPAdapter(max_retries=Retry(total=0, connect=0, read=0, redirect=0, status=0, raise_on_status=False))
        s.mount("http://", adapter)
        s.mount("https://", adapter)
        return s

    def _resolve_timeout(self) -> Timeout:
        if self.timeout is not None:
            return self.timeout
        cfg_timeout = self.config.publish_timeout
        if cfg_timeout is not None:
            return float(cfg_timeout)
        return self.DEFAULT_TIMEOUT

    # --------------------- 对外方法 ---------------------

    def message(self, channel: str, data: Any) -> Dict[str, Any]:
        """用当前配置的 secret_token 构造消息"""
        return build_message(channel, data, self.config.secret_token)

    def publish_to(self, channel: str, data: Any) -> Response:
        """构造消息并发布到指定 channel"""
        return self.publish_message(self.message(channel, data))

    def publish_message(self, message: Mapping[str, Any]) -> Response:
        """
        把消息 POST 给 broker。
        - 未配置 server：ConfigurationError
        - 连接/超时等网络错误：TransportError
        """
        server = self.config.server
        if not server:
            raise ConfigurationError("No server specified, ensure private_pub.yml was loaded properly.")
        try:
            url = endpoint_url(server)
        except ValueError as e:
            raise ConfigurationError(f"Invalid server url {server!r}") from e

        form = {"message": json.dumps(message, ensure_ascii=False, separators=(",", ":"))}
        self.logger.log_debug(
            f"PUBLISH POST {url} | channel={message.get('channel')} tls={is_secure(url)} size={len(form['message'])}"
        )

        try:
            resp = self.session.post(url, data=form, timeout=self._resolve_timeout())
        except requests.RequestException as e:
            self.logger.log_error(f"POST {url} 失败: {e}", exc_info=False)
            raise TransportError(f"publish to {url} failed: {e}") from e

        if not resp.ok:
            self.logger.log_warning(f"BAD_STATUS POST {url} -> {resp.status_code}")
            if self.check_status:
                raise BrokerResponseError(f"broker responded {resp.status_code} for POST {url}", response=resp)
        return resp

    # --------------------- 资源管理 ---------------------

    def close(self) -> None:
        """关闭自己创建的 Session；外部传入的 session 由调用方负责。"""
        if self._own_session:
            self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
