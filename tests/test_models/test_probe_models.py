"""Tests for probe configuration models."""

from datetime import timedelta

from ssh_exporter.models import HostCredential, HostResult, ProbeConfig, ScriptSpec


def test_host_credential_defaults() -> None:
    """New credentials default to port 22 and an unknown exit status."""
    cred = HostCredential(host="web-01", user="monitor")

    assert cred.port == "22"
    assert cred.exit_status == -1
    assert cred.matched == 0
    assert cred.output == ""
    assert cred.address == "monitor@web-01:22"


def test_record_copies_result_into_slot() -> None:
    """record() stores every result field on the credential."""
    cred = HostCredential(host="web-01", user="monitor")

    cred.record(HostResult(output="ok", exit_status=0, matched=True))

    assert cred.output == "ok"
    assert cred.exit_status == 0
    assert cred.matched == 1
    assert cred.error_text == ""
    assert cred.timed_out is False


def test_host_result_failure_formats_error() -> None:
    """failure() records the error class and detail with status -1."""
    result = HostResult.failure(OSError("connection refused"))

    assert result.exit_status == -1
    assert result.matched is False
    assert result.error_text == "OSError: connection refused"


def test_script_spec_defaults() -> None:
    """Scripts start unselected with the 10s default timeout."""
    script = ScriptSpec(name="echo")

    assert script.selected is False
    assert script.parsed_timeout == timedelta(seconds=10)
    assert script.targets == []


def test_selected_scripts_preserves_order() -> None:
    """selected_scripts keeps configuration order."""
    config = ProbeConfig(
        scripts=[
            ScriptSpec(name="a", selected=True),
            ScriptSpec(name="b", selected=False),
            ScriptSpec(name="c", selected=True),
        ]
    )

    assert [s.name for s in config.selected_scripts] == ["a", "c"]