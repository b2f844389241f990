import os
from typing import Any, Dict, Mapping, Optional

import yaml


def read_yaml(file_path: str) -> Any:
    """
    读取 YAML 文件并返回解析结果
    :param file_path: 配置文件路径（绝对路径，或相对当前工作目录）
    """
    config_file = os.path.abspath(os.path.expanduser(file_path))
    with open(config_file, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f)


def load_config(section=None, file_path=None, source: Optional[Mapping[str, Any]] = None):
    """
    加载 YAML 配置，并返回指定部分配置
    :param section: 配置块名称，例如 'production'；为空时返回整个文档
    :param file_path: 配置文件路径
    :param source: 已解析好的配置（优先于 file_path）
    :return: 配置块；配置块不存在时返回 None，由调用方决定如何报错
    """
    config = source if source is not None else read_yaml(file_path)
    if section is None:
        return config
    if not isinstance(config, Mapping):
        return None
    return config.get(str(section))


def env_overrides(mapping: Dict[str, str], environ: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """
    按 {环境变量名: 配置键} 映射读取环境变量，只返回已设置的项（原始字符串）
    """
    environ = os.environ if environ is None else environ
    return {key: environ[var] for var, key in mapping.items() if environ.get(var) is not None}
