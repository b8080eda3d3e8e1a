"""Unit tests for the pipeline logger."""

import logging

import pytest

from facededup.infrastructure.logging.colored_logger import (
    PIPELINE_LOGGER_NAME,
    PipelineLogger,
    PipelineStage,
)


def test_timed_step_logs_completion(caplog):
    log = PipelineLogger()

    with caplog.at_level(logging.INFO, logger=PIPELINE_LOGGER_NAME):
        with log.timed_step(PipelineStage.INSERTION, "Inserting faces", files=3):
            pass

    assert "[INSERTION]" in caplog.text
    assert "done: Inserting faces" in caplog.text
    assert "files=3" in caplog.text


def test_timed_step_logs_and_reraises_errors(caplog):
    log = PipelineLogger()

    with caplog.at_level(logging.INFO, logger=PIPELINE_LOGGER_NAME):
        with pytest.raises(ValueError):
            with log.timed_step(PipelineStage.IDENTIFICATION, "Identifying faces"):
                raise ValueError("bad image")

    errors = [r for r in caplog.records if r.levelno == logging.ERROR]
    assert len(errors) == 1
    assert "Identifying faces failed" in errors[0].getMessage()
    assert "ValueError: bad image" in errors[0].getMessage()
