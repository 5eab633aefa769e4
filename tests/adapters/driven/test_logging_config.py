"""Tests for the process-wide logger configuration."""

import logging
import re
from pathlib import Path

import pytest

from appboot.adapters.driven.logging.logging_config import configure_logger, reset_logger
from appboot.core.errors import ConfigError
from appboot.ports.logging import TRACE, LogLevel

__all__ = []

LINE_RE = re.compile(
    r"^\[\d{4}-\d{2}-\d{2}\]\[\d{2}:\d{2}:\d{2}\]\[(?P<name>[^\]]+)\]"
    r"\[(?P<level>[A-Z]+)\] (?P<message>.*)$"
)


def read_lines(path: Path) -> list[str]:
    """Flush handlers and return the log file lines."""
    for handler in logging.getLogger().handlers:
        handler.flush()
    return path.read_text(encoding="utf-8").splitlines()


def test_records_are_formatted_with_timestamp_module_and_level(tmp_path: Path) -> None:
    """Each record should render as [date][time][module][LEVEL] message."""
    log_file = tmp_path / "app.log"
    configure_logger(output_file=log_file)

    logging.getLogger("my_app.worker").info("hello")

    lines = read_lines(log_file)
    match = LINE_RE.match(lines[-1])
    assert match is not None
    assert match.group("name") == "my_app.worker"
    assert match.group("level") == "INFO"
    assert match.group("message") == "hello"


def test_records_always_go_to_stdout(capsys: pytest.CaptureFixture[str]) -> None:
    """Stdout should receive records even without an output file."""
    configure_logger()

    logging.getLogger("my_app").warning("disk almost full")

    out = capsys.readouterr().out
    assert "[my_app][WARNING] disk almost full" in out


def test_default_level_is_info(tmp_path: Path) -> None:
    """Without minimum_level, DEBUG should be filtered out."""
    log_file = tmp_path / "app.log"
    configure_logger(output_file=log_file)

    log = logging.getLogger("my_app")
    log.debug("hidden")
    log.info("shown")

    messages = [LINE_RE.match(line).group("message") for line in read_lines(log_file)]
    assert "shown" in messages
    assert "hidden" not in messages


def test_trace_level_enables_everything(tmp_path: Path) -> None:
    """TRACE should let trace records through with their own label."""
    log_file = tmp_path / "app.log"
    configure_logger(output_file=log_file, minimum_level=LogLevel.TRACE)

    logging.getLogger("my_app").log(TRACE, "very detailed")

    assert read_lines(log_file)[-1].endswith("[my_app][TRACE] very detailed")


def test_off_level_suppresses_errors(tmp_path: Path) -> None:
    """OFF should drop every record."""
    log_file = tmp_path / "app.log"
    configure_logger(output_file=log_file, minimum_level="off")

    logging.getLogger("my_app").critical("nobody hears this")

    assert read_lines(log_file) == []


def test_per_module_level_silences_noisy_dependency(tmp_path: Path) -> None:
    """An ERROR override should mute INFO from that module (and children) only."""
    log_file = tmp_path / "app.log"
    configure_logger(
        output_file=log_file,
        minimum_level=LogLevel.INFO,
        per_module_levels={"noisy_dep": LogLevel.ERROR},
    )

    logging.getLogger("noisy_dep").info("chatter")
    logging.getLogger("noisy_dep.pool").debug("more chatter")
    logging.getLogger("noisy_dep").error("real problem")
    logging.getLogger("my_app").info("business as usual")

    messages = [LINE_RE.match(line).group("message") for line in read_lines(log_file)]
    assert messages == ["real problem", "business as usual"]


def test_per_module_level_can_be_more_verbose(tmp_path: Path) -> None:
    """A DEBUG override should enable debug records for one module."""
    log_file = tmp_path / "app.log"
    configure_logger(output_file=log_file, per_module_levels={"my_app.db": "debug"})

    logging.getLogger("my_app.db").debug("query plan")
    logging.getLogger("my_app").debug("elsewhere")

    messages = [LINE_RE.match(line).group("message") for line in read_lines(log_file)]
    assert messages == ["query plan"]


def test_output_file_is_appended(tmp_path: Path) -> None:
    """An existing log file should be kept and extended."""
    log_file = tmp_path / "app.log"
    log_file.write_text("previous run\n", encoding="utf-8")
    configure_logger(output_file=str(log_file))

    logging.getLogger("my_app").info("new run")

    lines = read_lines(log_file)
    assert lines[0] == "previous run"
    assert lines[-1].endswith("new run")


def test_second_installation_is_rejected() -> None:
    """Installing twice in one process should be a configuration error."""
    configure_logger()

    with pytest.raises(ConfigError, match="already been installed"):
        configure_logger()


def test_unwritable_output_file_installs_nothing(tmp_path: Path) -> None:
    """A file that cannot be opened should fail without a stdout-only fallback."""
    root = logging.getLogger()
    handlers_before = list(root.handlers)

    with pytest.raises(ConfigError, match="Cannot open log file"):
        configure_logger(output_file=tmp_path / "missing_dir" / "app.log")

    assert root.handlers == handlers_before
    # Nothing was installed, so a valid configuration is still accepted
    configure_logger(output_file=tmp_path / "app.log")


def test_invalid_level_is_rejected() -> None:
    """Unknown level names should raise ConfigError."""
    with pytest.raises(ConfigError, match="minimum_level"):
        configure_logger(minimum_level="loud")

    with pytest.raises(ConfigError, match="noisy_dep"):
        configure_logger(per_module_levels={"noisy_dep": "quiet"})


def test_reset_logger_allows_reinstallation(tmp_path: Path) -> None:
    """After a reset, handlers are detached and a new configuration is accepted."""
    root = logging.getLogger()
    level_before = root.level
    configure_logger(per_module_levels={"noisy_dep": "error"})

    reset_logger()

    assert root.level == level_before
    assert logging.getLogger("noisy_dep").level == logging.NOTSET
    configure_logger(output_file=tmp_path / "app.log")
