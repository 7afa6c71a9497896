"""
Tests for the status model: ranking, aggregation and presentation.
"""

import pytest

from machine_setup.status import RESET, Status, aggregate, presentation


class TestAggregate:
    def test_empty_is_success(self):
        assert aggregate([]) is Status.SUCCESS

    def test_any_failure_fails(self):
        assert aggregate([Status.SUCCESS, Status.FAILURE, Status.PASSED]) is Status.FAILURE

    def test_non_failures_collapse_to_success(self):
        assert aggregate([Status.SKIPPED, Status.PASSED, Status.WARNING]) is Status.SUCCESS

    def test_consumes_every_child(self):
        seen = []

        def children():
            for s in (Status.FAILURE, Status.SUCCESS, Status.SUCCESS):
                seen.append(s)
                yield s

        assert aggregate(children()) is Status.FAILURE
        assert len(seen) == 3

    def test_running_cannot_be_aggregated(self):
        with pytest.raises(ValueError):
            aggregate([Status.SUCCESS, Status.RUNNING])


class TestRank:
    def test_total_order(self):
        ordered = [Status.NORMAL, Status.SKIPPED, Status.PASSED, Status.SUCCESS, Status.WARNING, Status.FAILURE]
        assert [s.rank for s in ordered] == sorted(s.rank for s in ordered)
        assert len({s.rank for s in ordered}) == len(ordered)

    def test_running_is_not_resting(self):
        assert not Status.RUNNING.is_resting
        assert all(s.is_resting for s in Status if s is not Status.RUNNING)


class TestPresentation:
    @pytest.mark.parametrize("status", list(Status))
    def test_is_deterministic(self, status):
        assert presentation(status) == presentation(status)

    @pytest.mark.parametrize("status", [s for s in Status if s is not Status.FAILURE])
    def test_non_failures_go_to_stdout(self, status):
        assert presentation(status)[1] == "stdout"

    def test_failure_goes_to_stderr(self):
        icon, stream = presentation(Status.FAILURE)
        assert stream == "stderr"
        assert "Failed" in icon

    def test_print_failure_writes_one_stderr_line(self, capsys):
        Status.FAILURE.print_message("apt-get install git")
        out, err = capsys.readouterr()
        assert out == ""
        assert err.count("\n") == 1
        assert "apt-get install git" in err
        assert err.startswith(Status.FAILURE.color)
        assert err.rstrip("\n").endswith(RESET)

    def test_print_success_writes_stdout(self, capsys):
        Status.SUCCESS.print_message("echo Hello")
        out, err = capsys.readouterr()
        assert err == ""
        assert "Succeeded: echo Hello" in out

    def test_normal_prints_bare_message(self, capsys):
        Status.NORMAL.print_message("plain")
        assert capsys.readouterr().out == "plain\n"
