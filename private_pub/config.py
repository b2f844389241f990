# ──────────────────────────────────────────────────────────────────────────────
# 模块用途：private_pub 的配置对象（YAML 环境块 / 环境变量 → PrivatePubConfig）
# 说明：
#   - 配置是一个 “键 → 值” 的映射：server / secret_token / signature_expiration /
#     log_state / publish_timeout；
#   - reset() 换一个新的空 dict，而不是原地 clear（旧引用不受影响）；
#   - 非线程安全：约定启动时加载一次，之后只读。
# ──────────────────────────────────────────────────────────────────────────────
from __future__ import annotations

import os
from typing import Any, Callable, Dict, Iterator, Mapping, Optional, Union

from private_pub.commons.base_logger import BaseLogger
from private_pub.commons.normalizers import empty_to_none, to_bool_or_none, to_float_or_none, to_int_or_none
from private_pub.tools.config_loader import env_overrides, load_config

from .errors import ConfigurationError

ConfigSource = Union[str, os.PathLike, Mapping[str, Any]]

# 环境变量名 → 配置键
ENV_MAPPING: Dict[str, str] = {
    "PRIVATE_PUB_SERVER": "server",
    "PRIVATE_PUB_SECRET_TOKEN": "secret_token",
    "PRIVATE_PUB_SIGNATURE_EXPIRATION": "signature_expiration",
    "PRIVATE_PUB_LOG_STATE": "log_state",
    "PRIVATE_PUB_PUBLISH_TIMEOUT": "publish_timeout",
}

# 环境变量字符串的转换器（未列出的键保持字符串）
ENV_CONVERTERS: Dict[str, Callable[[Any], Any]] = {
    "server": empty_to_none,
    "secret_token": empty_to_none,
    "signature_expiration": to_int_or_none,
    "log_state": to_bool_or_none,
    "publish_timeout": to_float_or_none,
}


class PrivatePubConfig:
    """进程内配置存储；显式构造后传给 Publisher / Signer / StatusLogger。"""

    def __init__(self, values: Optional[Mapping[str, Any]] = None, *, logger: Optional[BaseLogger] = None):
        self.logger = logger or BaseLogger(name="private_pub.config")
        self._values: Dict[str, Any] = {}
        if values:
            self.update(values)

    # ------------------ 生命周期 ------------------

    def reset(self) -> None:
        """重置为空配置（新建 dict）"""
        self._values = {}

    def load(self, source: ConfigSource, environment: Any) -> None:
        """
        从 YAML 文件（或已解析的 dict）中选出 environment 对应的块，合并进当前配置。
        环境块不存在时抛 ConfigurationError。
        """
        mapping = source if isinstance(source, Mapping) else None
        where = "<mapping>" if mapping is not None else str(source)
        section = load_config(environment, file_path=None if mapping is not None else str(source), source=mapping)
        if section is None:
            raise ConfigurationError(f"The {environment} environment does not exist in {where}")
        if not isinstance(section, Mapping):
            raise ConfigurationError(f"The {environment} environment in {where} is not a mapping")

        self.update(section)
        self.logger.log_debug(f"config loaded | env={environment} source={where} keys={sorted(self._values)}")

    def load_env(self, environ: Optional[Mapping[str, str]] = None) -> None:
        """用 PRIVATE_PUB_* 环境变量覆盖配置；未设置的变量不影响现有值。"""
        for key, raw in env_overrides(ENV_MAPPING, environ).items():
            value = ENV_CONVERTERS.get(key, lambda v: v)(raw)
            if value is None:
                self.logger.log_warning(f"ignore invalid env value for {key}: {raw!r}")
                continue
            self._values[key] = value

    # ------------------ 读写 ------------------

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(str(key), default)

    def set(self, key: str, value: Any) -> None:
        self._values[str(key)] = value

    def update(self, values: Mapping[str, Any]) -> None:
        for k, v in values.items():
            self._values[str(k)] = v

    def as_dict(self) -> Dict[str, Any]:
        return dict(self._values)

    def __getitem__(self, key: str) -> Any:
        return self._values[str(key)]

    def __contains__(self, key: object) -> bool:
        return str(key) in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        shown = {k: ("***" if k == "secret_token" and v else v) for k, v in self._values.items()}
        return f"PrivatePubConfig({shown!r})"

    # ------------------ 常用键 ------------------

    @property
    def server(self) -> Optional[str]:
        return self._values.get("server")

    @property
    def secret_token(self) -> Optional[str]:
        return self._values.get("secret_token")

    @property
    def signature_expiration(self) -> Optional[float]:
        return self._values.get("signature_expiration")

    @property
    def log_state(self) -> bool:
        # 只有 None / False 算关闭，0 和空串都算打开
        value = self._values.get("log_state")
        return value is not None and value is not False

    @property
    def publish_timeout(self) -> Optional[float]:
        return self._values.get("publish_timeout")
