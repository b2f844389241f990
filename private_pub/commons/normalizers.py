# commons/normalizers.py
from __future__ import annotations

"""
normalizers
-----------
配置值的字段级转换函数：func(value) -> new_value。
环境变量读出来都是字符串，这里统一转成 int / float / bool；非法值返回 None。
"""

from typing import Any, Optional


def empty_to_none(x: Any) -> Any:
    """将空串（含全空白）转换为 None，其它值保持不变。"""
    return None if isinstance(x, str) and x.strip() == "" else x


def to_int_or_none(x: Any) -> Optional[int]:
    """
    把值尽量强转为 int；空串/None/非法值返回 None：
    - "30" -> 30
    - 30.0 -> 30
    - "" / "  " / None -> None
    - "abc" -> None
    """
    try:
        return int(x) if x is not None and str(x).strip() != "" else None
    except (TypeError, ValueError):
        return None


def to_float_or_none(x: Any) -> Optional[float]:
    """将值转换为 float；空串/None/非法值返回 None。"""
    try:
        return float(x) if x is not None and str(x).strip() != "" else None
    except (TypeError, ValueError):
        return None


def to_bool_or_none(x: Any) -> Optional[bool]:
    """
    将值转换为 bool；常见真值：True/1/"1"/"true"/"yes"/"y"/"on"
    常见假值：False/0/"0"/"false"/"no"/"n"/"off"
    其它或空返回 None。
    """
    if x is None:
        return None
    if isinstance(x, bool):
        return x
    s = str(x).strip().lower()
    if s in {"1", "true", "yes", "y", "on"}:
        return True
    if s in {"0", "false", "no", "n", "off"}:
        return False
    return None
