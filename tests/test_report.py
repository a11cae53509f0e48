"""Tests for result aggregation and the printed summary."""

from s3nc.models import Failure, Success
from s3nc.report import aggregate, format_report


class TestAggregate:

    def test_partitions_by_outcome(self, snapshot):
        keys = snapshot(a=1, b=2, c=3)
        outcomes = [Success(keys["a"]), Failure(keys["b"], IOError("reset")), Success(keys["c"])]

        report = aggregate(outcomes, elapsed=1.5)

        assert report.success_count == 2
        assert report.failure_count == 1
        assert report.total == len(outcomes)
        assert report.elapsed == 1.5
        assert [f.key.name for f in report.failures] == ["b"]
        assert [str(e) for e in report.errors] == ["reset"]

    def test_empty(self):
        report = aggregate([], elapsed=0.0)

        assert (report.success_count, report.failure_count, report.failures) == (0, 0, ())


class TestFormatReport:

    def test_lists_failures(self, snapshot):
        keys = snapshot(a=1, b=2)
        report = aggregate([Success(keys["a"]), Failure(keys["b"], RuntimeError("denied"))], elapsed=2.0)

        lines = format_report(report)

        assert "Completed in 2.00 seconds. Copied 1 objects successfully while 1 failed (listed below)." in lines
        assert lines[-1] == "b: denied"

    def test_quiet_hides_failures(self, snapshot):
        keys = snapshot(b=2)
        report = aggregate([Failure(keys["b"], RuntimeError("denied"))], elapsed=2.0)

        lines = format_report(report, quiet=True)

        assert "b: denied" not in lines
        assert not any("listed below" in line for line in lines)

    def test_no_failures(self, snapshot):
        report = aggregate([Success(snapshot(a=1)["a"])], elapsed=0.25)

        lines = format_report(report)

        assert "Completed in 0.25 seconds. Copied 1 objects successfully while 0 failed." in lines
