import pytest

from gee.orm import log
from gee.orm.log import Level


@pytest.fixture(autouse=True)
def _reset_level():
    log.set_level(Level.INFO)
    yield
    log.set_level(Level.INFO)


def test_info_writes_prefixed_message(capsys):
    log.info("hello", 42)
    out = capsys.readouterr().out
    assert "[info]" in out
    assert "hello 42" in out


def test_error_writes_prefixed_message(capsys):
    log.error("broken")
    out = capsys.readouterr().out
    assert "[error]" in out
    assert "broken" in out


def test_error_level_silences_info(capsys):
    log.set_level(Level.ERROR)
    log.info("quiet")
    log.error("loud")
    out = capsys.readouterr().out
    assert "quiet" not in out
    assert "loud" in out


def test_disabled_level_silences_everything(capsys):
    log.set_level(Level.DISABLED)
    log.info("a-message")
    log.error("b-message")
    assert capsys.readouterr().out == ""


def test_raising_level_back_restores_output(capsys):
    log.set_level(Level.DISABLED)
    log.set_level(Level.INFO)
    log.info("back")
    assert "back" in capsys.readouterr().out


def test_invalid_level_rejected():
    with pytest.raises(ValueError):
        log.set_level(7)