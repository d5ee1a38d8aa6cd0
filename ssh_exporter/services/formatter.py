"""Render probe results in the Prometheus text exposition format.

The layout below is relied on by existing scrape configurations::

    # HELP ssh_exporter_<name>_exit_status Integer exit status of ...
    # TYPE ssh_exporter gauge
    ssh_exporter_<name>_exit_status{name=...,exit_status="<code>"} <code>
    # HELP ssh_exporter_<name>_pattern_match Boolean match of regex on ...
    # TYPE ssh_exporter gauge
    ssh_exporter_<name>_pattern_match{name=...,regex="<pattern>"} <0|1>
"""

from ssh_exporter.models import HostCredential, ProbeConfig, ScriptSpec

CONTENT_TYPE = "text/plain; version=0.0.4; charset=utf-8"

EXIT_STATUS_HELP = (
    "# HELP ssh_exporter_{name}_exit_status Integer exit status of commands "
    "and metadata about the command's execution.\n"
    "# TYPE ssh_exporter gauge"
)
PATTERN_MATCH_HELP = (
    "# HELP ssh_exporter_{name}_pattern_match Boolean match of regex on output "
    "of script of commands and metadata about the command's execution.\n"
    "# TYPE ssh_exporter gauge"
)


def escape_label(value: str) -> str:
    """Escape a label value for the exposition format."""
    return value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


def _common_labels(script: ScriptSpec, credential: HostCredential) -> str:
    return (
        f'name="{escape_label(script.name)}",'
        f'host="{escape_label(credential.host)}",'
        f'user="{escape_label(credential.user)}",'
        f'script="{escape_label(script.command)}"'
    )


def exit_status_line(script: ScriptSpec, credential: HostCredential) -> str:
    """Format the exit status sample for one host."""
    code = credential.exit_status
    return (
        f"ssh_exporter_{script.name}_exit_status"
        f'{{{_common_labels(script, credential)},exit_status="{code}"}} {code}'
    )


def pattern_match_line(script: ScriptSpec, credential: HostCredential) -> str:
    """Format the pattern match sample for one host."""
    return (
        f"ssh_exporter_{script.name}_pattern_match"
        f'{{{_common_labels(script, credential)},'
        f'regex="{escape_label(script.pattern)}"}} {credential.matched}'
    )


def render_script(script: ScriptSpec) -> str:
    """Render the block for a single script."""
    lines = [EXIT_STATUS_HELP.format(name=script.name)]
    lines.extend(exit_status_line(script, cred) for cred in script.targets)
    lines.append(PATTERN_MATCH_HELP.format(name=script.name))
    lines.extend(pattern_match_line(script, cred) for cred in script.targets)
    return "\n".join(lines) + "\n"


def render(config: ProbeConfig) -> str:
    """Render all selected scripts, in configuration order."""
    return "".join(render_script(script) for script in config.selected_scripts)


def render_self_metrics(
    timing: dict[str, dict[str, float | int]],
    host_outcomes: dict[str, int],
    pool_slots: dict[str, int],
    error_counts: dict[str, int],
) -> str:
    """Render the exporter's own telemetry.

    Args:
        timing: Per-path timing stats as produced by ``TimingRegistry``
        host_outcomes: Host execution counts by outcome
        pool_slots: Worker pool gauges (max, active, queued) and completed count
        error_counts: Unhandled HTTP errors by exception type
    """
    lines = [
        "# HELP ssh_exporter_http_request_duration_seconds Duration of HTTP requests by path.",
        "# TYPE ssh_exporter_http_request_duration_seconds summary",
    ]
    for path, stats in timing.items():
        label = f'path="{escape_label(path)}"'
        lines.append(
            f"ssh_exporter_http_request_duration_seconds_count{{{label}}} {stats['count']}"
        )
        lines.append(
            f"ssh_exporter_http_request_duration_seconds_sum{{{label}}} "
            f"{stats['total_ms'] / 1000:g}"
        )
    for bound in ("min", "max"):
        name = f"ssh_exporter_http_request_duration_seconds_{bound}"
        lines.append(f"# HELP {name} {bound.capitalize()} HTTP request duration by path.")
        lines.append(f"# TYPE {name} gauge")
        for path, stats in timing.items():
            lines.append(
                f'{name}{{path="{escape_label(path)}"}} {stats[f"{bound}_ms"] / 1000:g}'
            )

    lines.append(
        "# HELP ssh_exporter_host_executions_total Remote script executions by outcome."
    )
    lines.append("# TYPE ssh_exporter_host_executions_total counter")
    for outcome in ("ok", "failed", "timeout"):
        lines.append(
            f'ssh_exporter_host_executions_total{{outcome="{outcome}"}} '
            f"{host_outcomes.get(outcome, 0)}"
        )

    lines.append("# HELP ssh_exporter_worker_pool_slots Worker pool capacity and usage.")
    lines.append("# TYPE ssh_exporter_worker_pool_slots gauge")
    for state in ("max", "active", "queued"):
        lines.append(
            f'ssh_exporter_worker_pool_slots{{state="{state}"}} {pool_slots.get(state, 0)}'
        )
    lines.append(
        "# HELP ssh_exporter_worker_pool_completed_total Executions that released a pool slot."
    )
    lines.append("# TYPE ssh_exporter_worker_pool_completed_total counter")
    lines.append(f"ssh_exporter_worker_pool_completed_total {pool_slots.get('completed', 0)}")

    lines.append("# HELP ssh_exporter_http_errors_total Unhandled HTTP errors by type.")
    lines.append("# TYPE ssh_exporter_http_errors_total counter")
    for error_type in sorted(error_counts):
        lines.append(
            f'ssh_exporter_http_errors_total{{type="{escape_label(error_type)}"}} '
            f"{error_counts[error_type]}"
        )

    return "\n".join(lines) + "\n"
