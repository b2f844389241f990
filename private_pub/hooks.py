# ──────────────────────────────────────────────────────────────────────────────
# 模块用途：broker 生命周期回调（handshake / subscribe / unsubscribe / publish / disconnect）
# 说明：
#   - 本模块不实现 broker，只把回调挂到外部 broker 实例上（broker.on(event, callback)）；
#   - 默认动作：通过 StatusLogger 输出一行状态；
#   - broker_app() 负责合并 mount / timeout / ping / extensions 默认值并构造 broker。
# ──────────────────────────────────────────────────────────────────────────────
from __future__ import annotations

from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol, Tuple

from private_pub.commons.base_logger import BaseLogger

from .status import StatusLogger

EVENTS: Tuple[str, ...] = ("handshake", "subscribe", "unsubscribe", "publish", "disconnect")

DEFAULT_BROKER_OPTIONS: Dict[str, Any] = {"mount": "/faye", "timeout": 45, "ping": 15}


class BrokerAdapter(Protocol):
    """外部 broker 需要提供的最小接口：按事件名注册回调。"""
    def on(self, event: str, callback: Callable[..., Any]) -> Any: ...


class LifecycleHooks:
    """
    生命周期回调集合。
    - on_* 为默认回调：输出状态行
    - add_listener 可以给某个事件追加回调；追加的回调出错只记日志，不影响其它回调
    """

    def __init__(self, status: StatusLogger, *, logger: Optional[BaseLogger] = None):
        self.status = status
        self.logger = logger or BaseLogger(name="private_pub.hooks")
        self._listeners: Dict[str, List[Callable[..., Any]]] = {e: [] for e in EVENTS}

    # ------------------ 默认回调 ------------------

    def on_handshake(self, client_id: str) -> None:
        self.status.log(f"Client {client_id} handshake!")
        self._notify("handshake", client_id)

    def on_subscribe(self, client_id: str, channel: str) -> None:
        self.status.log(f"Client {client_id} subscribes Channel: {channel}!")
        self._notify("subscribe", client_id, channel)

    def on_unsubscribe(self, client_id: str, channel: str) -> None:
        self.status.log(f"Client {client_id} leaves Channel: {channel}!")
        self._notify("unsubscribe", client_id, channel)

    def on_publish(self, client_id: Optional[str], channel: str, data: Any = None) -> None:
        # client_id 为 None 表示服务端发布
        who = f"Client {client_id}" if client_id is not None else "Server"
        self.status.log(f"{who} publishes to Channel: {channel}!")
        self._notify("publish", client_id, channel, data)

    def on_disconnect(self, client_id: str) -> None:
        self.status.log(f"Client {client_id} is disconnected!")
        self._notify("disconnect", client_id)

    # ------------------ 注册 ------------------

    def add_listener(self, event: str, fn: Callable[..., Any]) -> Callable[..., Any]:
        """追加回调，可当装饰器用：@hooks.listener("subscribe")"""
        if event not in self._listeners:
            raise ValueError(f"unknown lifecycle event: {event!r}, expected one of {EVENTS}")
        self._listeners[event].append(fn)
        return fn

    def listener(self, event: str):
        def deco(fn: Callable[..., Any]):
            return self.add_listener(event, fn)
        return deco

    def callbacks(self) -> Dict[str, Callable[..., Any]]:
        """事件名 -> 默认回调"""
        return {event: getattr(self, f"on_{event}") for event in EVENTS}

    def bind(self, broker: BrokerAdapter) -> BrokerAdapter:
        """把 5 个回调挂到 broker 上"""
        for event, callback in self.callbacks().items():
            broker.on(event, callback)
        return broker

    def _notify(self, event: str, *args: Any) -> None:
        for fn in self._listeners[event]:
            try:
                fn(*args)
            except Exception as e:
                self.logger.log_error(f"lifecycle listener failed | event={event} fn={getattr(fn, '__name__', fn)!r} err={e!r}")


def broker_options(options: Optional[Mapping[str, Any]] = None, *, extensions: Optional[List[Any]] = None) -> Dict[str, Any]:
    """默认值 {mount, timeout, ping, extensions} 与调用方 options 合并（调用方优先，整键覆盖）。"""
    merged: Dict[str, Any] = dict(DEFAULT_BROKER_OPTIONS)
    merged["extensions"] = list(extensions or [])
    if options:
        merged.update(options)
    return merged


def broker_app(
    broker_factory: Callable[..., BrokerAdapter],
    options: Optional[Mapping[str, Any]] = None,
    *,
    hooks: LifecycleHooks,
    extensions: Optional[List[Any]] = None,
) -> BrokerAdapter:
    """
    构造 broker 并挂上生命周期回调。
    :param broker_factory: 外部 broker 的构造函数，接收合并后的 options 作为关键字参数
    :param options: 覆盖默认值的选项
    :param hooks: 生命周期回调
    :param extensions: 默认扩展（一般是 SubscriptionGuard）；options 里给了 extensions 则以 options 为准
    """
    connection = broker_factory(**broker_options(options, extensions=extensions))
    return hooks.bind(connection)
