"""
Tests for the logging sinks and the decision log executor.
"""

import asyncio
import uuid

from fogscale.constants import DECISION_CSV_HEADER
from fogscale.logger.formatter import DelimitedFormatter
from fogscale.logger.scale_logger import ScaleLogger
from fogscale.objects import EvaluationResult
from fogscale.scaling.executor import DecisionLogExecutor


def unique_name(prefix):
    return f"{prefix}_{uuid.uuid4().hex[:8]}"


class TestScaleLogger:
    """Test ScaleLogger"""

    def test_console_only_without_dir(self, tmp_path):
        logger = ScaleLogger(unique_name("console"))

        assert len(logger.loggers) == 1
        logger.csv_log(["ignored"])
        logger.std_log("message %s", 1)
        assert list(tmp_path.iterdir()) == []

    def test_file_and_csv_sinks(self, tmp_path):
        name = unique_name("sinks")
        logger = ScaleLogger(name, dirname=tmp_path, csv_header=["a", "b"])

        logger.std_log("scaled %s", "frontend")
        logger.csv_log([1, "x"])

        assert "scaled frontend" in (tmp_path / f"file_{name}.log").read_text()
        assert (tmp_path / f"csv_{name}.csv").read_text().splitlines() == ["a,b", "1,x"]

    def test_header_written_once_when_appending(self, tmp_path):
        name = unique_name("append")
        ScaleLogger(name, dirname=tmp_path, csv_header=["a"]).csv_log(["1"])
        ScaleLogger(name, dirname=tmp_path, csv_header=["a"]).csv_log(["2"])

        assert (tmp_path / f"csv_{name}.csv").read_text().splitlines() == ["a", "1", "2"]


class TestDecisionLogExecutor:
    """Test DecisionLogExecutor"""

    def test_records_decisions(self, tmp_path, scaled_object, make_scaled_job):
        name = unique_name("decisions")
        logger = ScaleLogger(name, dirname=tmp_path, csv_header=DECISION_CSV_HEADER)
        executor = DecisionLogExecutor(logger=logger)
        scaled_job = make_scaled_job()

        asyncio.run(executor.request_scale(scaled_object, True, False))
        asyncio.run(executor.request_job_scale(scaled_job, True, 20, 10))

        assert executor.decisions[scaled_object.ref] == EvaluationResult(is_active=True)
        assert executor.decisions[scaled_job.ref] == EvaluationResult(True, False, 20, 10)

        rows = [line.split(",") for line in (tmp_path / f"csv_{name}.csv").read_text().splitlines()]
        assert rows[0] == DECISION_CSV_HEADER
        assert rows[1][1:] == ["default", "frontend", "ScaledObject", "True", "False", "0", "0"]
        assert rows[2][1:] == ["default", "worker", "ScaledJob", "True", "False", "20", "10"]


class TestDelimitedFormatter:
    """Test DelimitedFormatter"""

    def test_plain_fields(self):
        assert DelimitedFormatter().delimit_message(["a", 1, True, None]) == "a,1,True,"

    def test_fields_are_quoted(self):
        row = DelimitedFormatter().delimit_message(["default", 'say "hi", then', "x\ny"])
        assert row == 'default,"say ""hi"", then","x\ny"'

    def test_other_delimiter(self):
        assert DelimitedFormatter(delimiter=";").delimit_message(["a,b", "c;d"]) == 'a,b;"c;d"'

    def test_non_row_message(self):
        assert DelimitedFormatter().delimit_message("plain") == "plain"
