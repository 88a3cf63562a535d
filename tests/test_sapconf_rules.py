"""
Tests for the sapconf checks, run through the full check pipeline.
"""

import pytest

from core.checker import check


def failing(result):
    return [f for f in result.findings if f.severity == "FAIL"]


def warning(result):
    return [f for f in result.findings if f.severity == "WARN"]


class TestSapconfWithTuned:

    def test_correct_setup(self, snapshot_for):
        """sapconf 4 active+enabled, tuned active+disabled, profile sapconf."""
        result = check("sapconf", snapshot_for("sapconf-4"))

        assert result.status == "ok"
        assert result.warnings == 0
        assert result.failures == 0
        assert result.tier == "WITH_TUNED"
        assert {f.severity for f in result.findings} == {"OK"}
        assert result.summary == ["The sapconf setup is correct."]

    def test_sapconf_service_inactive(self, snapshot_for):
        snapshot = snapshot_for("sapconf-4", active={"sapconf.service": "inactive"})
        result = check("sapconf", snapshot)

        assert result.status == "fail"
        assert [f.hint for f in failing(result)] == ["Run 'systemctl start sapconf.service' to start sapconf."]
        # tuned keeps running without sapconf
        assert [f.subject for f in warning(result)] == ["tuned.service"]

    def test_tuned_down_while_sapconf_active(self, snapshot_for):
        result = check("sapconf", snapshot_for("sapconf-4", active={"tuned.service": "inactive"}))

        assert result.failures == 1
        assert failing(result)[0].subject == "tuned.service"
        assert "systemctl restart sapconf.service" in failing(result)[0].hint

    def test_tuned_enabled_without_sapconf(self, snapshot_for):
        snapshot = snapshot_for("sapconf-4", enabled={"sapconf.service": "disabled", "tuned.service": "enabled"})
        result = check("sapconf", snapshot)

        assert [f.subject for f in failing(result)] == ["sapconf.service"]
        assert [f.subject for f in warning(result)] == ["tuned.service"]

    def test_tuned_enabled_with_sapconf_is_fine(self, snapshot_for):
        result = check("sapconf", snapshot_for("sapconf-4", enabled={"tuned.service": "enabled"}))
        assert result.status == "ok"

    @pytest.mark.parametrize("profile, severity, text", [
        ("sapconf", "OK", "'sapconf' is set"),
        ("sap-hana", "WARN", "deprecated"),
        ("sap-netweaver", "WARN", "deprecated"),
        (None, "FAIL", "No tuned profile"),
        ("   ", "FAIL", "No tuned profile"),
        ("throughput-performance", "FAIL", "'throughput-performance'"),
    ])
    def test_tuned_profile(self, snapshot_for, profile, severity, text):
        result = check("sapconf", snapshot_for("sapconf-4", profiles={"tuned": profile}))
        finding = next(f for f in result.findings if f.subject == "tuned profile")

        assert finding.severity == severity
        assert text in finding.message

    def test_missing_tuned_package_skips_tuned_rules(self, snapshot_for):
        result = check("sapconf", snapshot_for("sapconf-4", packages={"tuned": None}))

        assert [f.subject for f in failing(result)] == ["tuned"]
        assert "zypper install tuned" in failing(result)[0].hint
        assert not [f for f in result.findings if f.subject in ("tuned.service", "tuned profile")]

    @pytest.mark.parametrize("tag", ["sapconf-4", "sapconf-5"])
    def test_saptune_must_not_run(self, snapshot_for, tag):
        snapshot = snapshot_for(tag, packages={"saptune": "3.1.2"},
                                active={"saptune.service": "active"}, enabled={"saptune.service": "enabled"})
        result = check("sapconf", snapshot)

        assert [f.hint for f in failing(result)] == [
            "Run 'systemctl stop saptune.service' to stop saptune.",
            "Run 'systemctl disable saptune.service' to disable saptune.",
        ]

    def test_leftover_product_profile_on_sles12(self, snapshot_for):
        snapshot = snapshot_for("sapconf-4", os_major=12, extra_paths=["/usr/lib/tuned/sap-hana/tuned.conf"])
        result = check("sapconf", snapshot)

        assert result.status == "warn"
        assert result.findings[0].subject == "/usr/lib/tuned/sap-hana/tuned.conf"
        assert result.summary[0] == "1 warning(s) have been found."

    def test_file_findings_come_first(self, snapshot_for):
        snapshot = snapshot_for("sapconf-4", missing_paths=["/etc/sysconfig/sapconf"],
                                active={"tuned.service": "inactive"})
        result = check("sapconf", snapshot)

        assert [f.subject for f in failing(result)] == ["/etc/sysconfig/sapconf", "tuned.service"]


class TestSapconfStandalone:

    def test_correct_setup(self, snapshot_for):
        result = check("sapconf", snapshot_for("sapconf-5"))
        assert result.status == "ok"
        assert result.tier == "STANDALONE"

    def test_tuned_next_to_sapconf_conflicts(self, snapshot_for):
        result = check("sapconf", snapshot_for("sapconf-5", active={"tuned.service": "active"}))

        assert [f.subject for f in failing(result)] == ["tuned.service"]
        assert "systemctl stop tuned.service" in failing(result)[0].hint

    def test_tuned_without_sapconf_only_warns_for_tuned(self, snapshot_for):
        snapshot = snapshot_for("sapconf-5", active={"sapconf.service": "inactive", "tuned.service": "active"})
        result = check("sapconf", snapshot)

        assert [f.subject for f in failing(result)] == ["sapconf.service"]
        assert [f.subject for f in warning(result)] == ["tuned.service"]

    def test_tuned_enabled_warns(self, snapshot_for):
        result = check("sapconf", snapshot_for("sapconf-5", enabled={"tuned.service": "enabled"}))

        assert result.status == "warn"
        assert "systemctl disable tuned.service" in warning(result)[0].hint

    def test_no_tuned_at_all(self, snapshot_for):
        snapshot = snapshot_for("sapconf-5", packages={"tuned": None},
                                active={"tuned.service": "missing"}, enabled={"tuned.service": "missing"})
        assert check("sapconf", snapshot).status == "ok"


class TestSapconfTerminal:

    def test_not_installed(self, snapshot_for):
        result = check("sapconf", snapshot_for("sapconf-4", packages={"sapconf": None}))

        assert result.status == "not-installed"
        assert result.findings == []

    @pytest.mark.parametrize("version", ["4.1.11", "3.0.1", "6.0.0", "garbage"])
    def test_single_fail_and_nothing_else(self, snapshot_for, version):
        # everything else is broken as well, none of it is reported
        snapshot = snapshot_for("sapconf-4", packages={"sapconf": version},
                                active={"sapconf.service": "inactive"}, missing_paths=["/etc/sysconfig/sapconf"])
        result = check("sapconf", snapshot)

        assert result.status == "fail"
        assert len(result.findings) == 1
        assert result.findings[0].severity == "FAIL"
        assert result.failures == 1
