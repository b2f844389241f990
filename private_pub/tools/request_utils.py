from urllib.parse import urlsplit, urlunsplit


def endpoint_url(server: str) -> str:
    """
    由配置的 server 地址得到 POST 目标：
    - 没有 path 时使用根路径 '/'
    - 保留 scheme（https 即走 TLS）、host、port 与 path
    - 丢弃 query / fragment（请求体只携带 message 表单字段）
    """
    parts = urlsplit(server)
    if not parts.scheme or not parts.netloc:
        raise ValueError(f"invalid server url: {server!r}")
    path = parts.path or "/"
    return urlunsplit((parts.scheme, parts.netloc, path, "", ""))


def is_secure(url: str) -> bool:
    """https 地址返回 True"""
    return urlsplit(url).scheme.lower() == "https"
