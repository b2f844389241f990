# 状态输出 StatusLogger

from __future__ import annotations
from typing import Optional

from private_pub.commons.base_logger import BaseLogger

from .config import PrivatePubConfig


class StatusLogger:
    """
    broker 生命周期的状态行输出（写 stdout，只输出消息本身）。
    注意开关是反的：log_state 为假（或未配置）时输出并返回 None；
    log_state 为真时不输出，直接返回 True。
    """

    def __init__(self, config: PrivatePubConfig, *, logger: Optional[BaseLogger] = None):
        self.config = config
        self.logger = logger or BaseLogger(name="private_pub.status", to_stdout=True, fmt="%(message)s")

    def log(self, message: str) -> Optional[bool]:
        if self.config.log_state:
            return True
        self.logger.log_info(message)
        return None
