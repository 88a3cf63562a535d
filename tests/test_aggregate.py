"""
Unit tests for core.aggregate and the Finding model.
"""

import pytest

from core.aggregate import FindingAggregator
from core.models import Finding

OK = Finding("OK", "a", "fine")
NOTE = Finding("NOTE", "b", "noted")
WARN = Finding("WARN", "c", "hmm", "do x")
FAIL = Finding("FAIL", "d", "broken", "do y")


class TestFindingAggregator:

    def test_empty_is_ok(self):
        aggregator = FindingAggregator("saptune")
        assert aggregator.status == "ok"
        assert aggregator.summary() == ["The saptune setup is correct."]

    def test_ok_and_note_are_not_counted(self):
        aggregator = FindingAggregator("sapconf")
        aggregator.extend([OK, NOTE, NOTE])

        assert (aggregator.warnings, aggregator.failures) == (0, 0)
        assert aggregator.status == "ok"
        assert len(aggregator.findings) == 3

    def test_warnings_only(self):
        aggregator = FindingAggregator("sapconf")
        aggregator.extend([OK, WARN, WARN])

        assert aggregator.status == "warn"
        assert aggregator.summary() == [
            "2 warning(s) have been found.",
            "The sapconf setup works, but some settings should be reviewed.",
        ]

    def test_failure_wins(self):
        aggregator = FindingAggregator("saptune")
        aggregator.extend([WARN, FAIL, OK, FAIL])

        assert aggregator.status == "fail"
        summary = aggregator.summary()
        assert summary[:2] == ["1 warning(s) have been found.", "2 error(s) have been found."]
        assert summary[2].startswith("The saptune setup is not correct.")

    def test_keeps_emission_order(self):
        aggregator = FindingAggregator("saptune")
        aggregator.extend([FAIL, OK, WARN])
        assert aggregator.findings == [FAIL, OK, WARN]


class TestFinding:

    @pytest.mark.parametrize("severity", ["WARN", "FAIL"])
    def test_hint_required(self, severity):
        with pytest.raises(ValueError):
            Finding(severity, "x", "no hint")

    @pytest.mark.parametrize("severity", ["OK", "NOTE"])
    def test_hint_not_allowed(self, severity):
        with pytest.raises(ValueError):
            Finding(severity, "x", "fine", "but why a hint")

    def test_unknown_severity(self):
        with pytest.raises(ValueError):
            Finding("ERROR", "x", "?", "?")
