import os

import pytest


def logger_file_test(tmp_path):
    import namat
    log_file = os.path.join(tmp_path, "test.log")
    logger = namat.Logger(log_file)
    logger.statement("a statement")
    logger.log("step")
    logger.log("step")
    logger.close()
    with open(log_file, "r") as f:
        content = f.read()
    assert "opening " + log_file + " for logging" in content
    assert content.count("opening ") == 1
    assert "a statement" in content
    assert "starting: step" in content
    assert "finished: step took:" in content
    assert logger.items == {}


def logger_echo_test(capsys):
    import namat
    logger = namat.Logger(True)
    assert logger.f is None
    logger.statement("echoed")
    assert "echoed" in capsys.readouterr().out

    quiet = namat.Logger(False)
    quiet.statement("silent")
    assert capsys.readouterr().out == ""


def logger_warn_test(tmp_path):
    import namat
    log_file = os.path.join(tmp_path, "warn.log")
    logger = namat.Logger(log_file)
    with pytest.warns(namat.NamatWarning):
        logger.warn("watch out")
    logger.close()
    with open(log_file, "r") as f:
        assert "WARNING: watch out" in f.read()


def logger_lraise_test(tmp_path):
    import namat
    log_file = os.path.join(tmp_path, "err.log")
    logger = namat.Logger(log_file)
    with pytest.raises(namat.DimensionMismatch):
        logger.lraise("bad dims", namat.DimensionMismatch)
    assert logger.f is None
    with open(log_file, "r") as f:
        assert "ERROR: bad dims" in f.read()
    with pytest.raises(Exception):
        namat.Logger(False).lraise("plain")


def logger_lraise_quiet_test(capsys):
    import namat
    with pytest.raises(namat.ShapeMismatch):
        namat.Logger(False).lraise("quiet", namat.ShapeMismatch)
    assert capsys.readouterr().out == ""
    with pytest.raises(namat.ShapeMismatch):
        namat.Logger(True).lraise("loud", namat.ShapeMismatch)
    assert "ERROR: loud" in capsys.readouterr().out


def warning_format_test():
    import warnings
    import namat
    line = warnings.formatwarning("msg", namat.NamatWarning, "f.py", 3)
    assert "NamatWarning" in line
    assert "msg" in line


if __name__ == "__main__":
    warning_format_test()
