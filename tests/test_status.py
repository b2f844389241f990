from private_pub.config import PrivatePubConfig
from private_pub.status import StatusLogger


def test_logs_to_stdout_when_log_state_unset(capsys):
    status = StatusLogger(PrivatePubConfig())
    assert status.log("Client 1 handshake!") is None
    assert capsys.readouterr().out == "Client 1 handshake!\n"


def test_logs_to_stdout_when_log_state_false(capsys):
    status = StatusLogger(PrivatePubConfig({"log_state": False}))
    status.log("hello")
    assert capsys.readouterr().out == "hello\n"


def test_suppressed_when_log_state_true(capsys):
    status = StatusLogger(PrivatePubConfig({"log_state": True}))
    assert status.log("hello") is True
    assert capsys.readouterr().out == ""


def test_reads_flag_at_call_time(capsys):
    cfg = PrivatePubConfig()
    status = StatusLogger(cfg)
    cfg.set("log_state", True)
    assert status.log("quiet") is True
    cfg.reset()
    status.log("loud")
    assert capsys.readouterr().out == "loud\n"


def test_zero_log_state_counts_as_on(capsys):
    # 只有 None / False 算关闭
    status = StatusLogger(PrivatePubConfig({"log_state": 0}))
    assert status.log("hello") is True
    assert capsys.readouterr().out == ""
