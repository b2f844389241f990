import logging
import os
import sys
from logging.handlers import TimedRotatingFileHandler


DEFAULT_FORMAT = (
    "%(asctime)s | %(name)s | %(levelname)s | "
    "[%(filename)s:%(lineno)d %(funcName)s] | %(threadName)s | %(message)s"
)


class _StdoutHandler(logging.StreamHandler):
    """每次 emit 时重新取 sys.stdout（stdout 被替换后仍能输出到新的流）"""

    def __init__(self):
        super().__init__(sys.stdout)

    def emit(self, record):
        self.stream = sys.stdout
        super().emit(record)


class BaseLogger:
    """
    基础日志类：
    - 控制台输出（stderr 或 stdout）+ 可选按天轮转文件
    - logger 名按组件命名，例如 private_pub.publisher
    - 统一格式化输出（含时间、文件名、函数、线程）
    """

    def __init__(
        self,
        name: str = "private_pub",
        level: int = logging.INFO,
        to_file: bool = False,
        file_path: str | None = None,
        file_level: int = logging.ERROR,
        to_stdout: bool = False,
        fmt: str = DEFAULT_FORMAT,
    ):
        """
        初始化日志系统。

        :param name: logger 名称
        :param level: 控制台日志级别（默认 INFO）
        :param to_file: 是否启用文件日志
        :param file_path: 日志文件路径（可选，默认 logs/<name>.log）
        :param file_level: 文件日志的最低级别（默认 ERROR，仅错误写入）
        :param to_stdout: 控制台 handler 写 stdout 而不是 stderr
        :param fmt: 日志格式
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(level)
        self.logger.propagate = False  # 防止重复输出

        # 同名 logger 只配置一次 handler
        if not self.logger.handlers:
            formatter = logging.Formatter(fmt)

            ch = _StdoutHandler() if to_stdout else logging.StreamHandler()
            ch.setLevel(level)
            ch.setFormatter(formatter)
            self.logger.addHandler(ch)

            if to_file:
                if file_path is None:
                    log_dir = os.path.join(os.getcwd(), "logs")
                    os.makedirs(log_dir, exist_ok=True)
                    file_path = os.path.join(log_dir, f"{self.logger.name}.log")

                fh = TimedRotatingFileHandler(
                    filename=file_path,
                    when="midnight",  # 每天轮转
                    interval=1,
                    backupCount=7,  # 保留 7 天
                    encoding="utf-8",
                )
                fh.setLevel(file_level)
                fh.setFormatter(formatter)
                self.logger.addHandler(fh)

    # ------------------ 对外日志接口 ------------------

    def log_info(self, message: str, exc_info: bool = False):
        """记录 INFO 日志"""
        self.logger.info(message, exc_info=exc_info)

    def log_warning(self, message: str, exc_info: bool = False):
        """记录 WARNING 日志"""
        self.logger.warning(message, exc_info=exc_info)

    def log_error(self, message: str, exc_info: bool = True):
        """记录 ERROR 日志（默认包含异常堆栈）"""
        self.logger.error(message, exc_info=exc_info)

    def log_debug(self, message: str, exc_info: bool = False):
        """记录 DEBUG 日志"""
        self.logger.debug(message, exc_info=exc_info)
