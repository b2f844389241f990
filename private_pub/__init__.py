# private_pub/__init__.py
from typing import Any, Optional

from .client import PrivatePub
from .config import PrivatePubConfig
from .errors import BrokerResponseError, ConfigurationError, PrivatePubError, TransportError
from .guard import SubscriptionGuard
from .hooks import EVENTS, BrokerAdapter, LifecycleHooks
from .message import DataPayload, ScriptPayload, as_payload, build_message
from .publisher import Publisher
from .signer import Signer
from .status import StatusLogger

# 进程级默认实例：第一次用到时才创建（import 时不建 Session / logger）
_default: Optional[PrivatePub] = None


def get_default() -> PrivatePub:
    global _default
    if _default is None:
        _default = PrivatePub()
    return _default


def __getattr__(name: str) -> Any:
    if name == "default":
        return get_default()
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def reset_config():
    return get_default().reset_config()


def load_config(source, environment):
    return get_default().load_config(source, environment)


def publish_to(channel, data):
    return get_default().publish_to(channel, data)


def publish_message(message):
    return get_default().publish_message(message)


def subscription(options=None, **kwargs):
    return get_default().subscription(options, **kwargs)


def signature_expired(timestamp):
    return get_default().signature_expired(timestamp)


def log_status(message):
    return get_default().log_status(message)


def broker_app(broker_factory, options=None):
    return get_default().broker_app(broker_factory, options)


__all__ = [
    "PrivatePub", "PrivatePubConfig", "Publisher", "Signer", "StatusLogger",
    "LifecycleHooks", "SubscriptionGuard", "BrokerAdapter", "EVENTS",
    "ScriptPayload", "DataPayload", "as_payload", "build_message",
    "PrivatePubError", "ConfigurationError", "TransportError", "BrokerResponseError",
    "get_default",
    "reset_config", "load_config", "publish_to", "publish_message",
    "subscription", "signature_expired", "log_status", "broker_app",
]
