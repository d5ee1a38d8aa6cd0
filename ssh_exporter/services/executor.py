"""Per-host script execution.

``execute_on_host`` never raises for host-level failures: connection,
authentication, command and timeout errors all become fields of the
returned ``HostResult``.
"""

import asyncio
import logging
import re
from datetime import timedelta

from ssh_exporter.models import HostCredential, HostResult
from ssh_exporter.models.result import UNKNOWN_EXIT_STATUS
from ssh_exporter.protocols import CommandRunner
from ssh_exporter.services.matcher import CompiledMatcher
from ssh_exporter.services.runner import (
    RemoteCommandError,
    RemoteExecutionError,
    RemoteTimeoutError,
)

logger = logging.getLogger(__name__)

_EXIT_STATUS_PATTERN = re.compile(r"exited with status (-?\d+)")


def escape_newlines(text: str) -> str:
    """Replace newlines with a literal backslash-n for single-line embedding."""
    return text.replace("\n", "\\n")


def exit_status_from_error(error: RemoteExecutionError) -> int:
    """Extract the remote exit status from an execution failure.

    Uses the status reported by the transport, falling back to parsing the
    failure detail. Returns -1 if no non-zero status can be found.
    """
    status = error.exit_status
    if status is None:
        found = _EXIT_STATUS_PATTERN.search(str(error.original_error))
        status = int(found.group(1)) if found else None

    if not status:
        return UNKNOWN_EXIT_STATUS
    return status


async def execute_on_host(
    runner: CommandRunner,
    credential: HostCredential,
    command: str,
    matcher: CompiledMatcher,
    timeout: timedelta | None = None,
) -> HostResult:
    """Run a command on one host and evaluate its output.

    Args:
        runner: Remote command transport
        credential: Target host
        command: Shell command text
        matcher: Pattern tested against the command output
        timeout: Abort the execution after this long (None waits forever)

    Returns:
        HostResult describing the outcome
    """
    try:
        if timeout is None:
            raw_output = await runner.run(credential, command)
        else:
            raw_output = await asyncio.wait_for(
                runner.run(credential, command),
                timeout=timeout.total_seconds(),
            )
    except asyncio.TimeoutError:
        detail = f"no result after {timeout.total_seconds():g}s" if timeout else "timed out"
        error = RemoteTimeoutError(credential.address, detail)
        logger.warning("Timed out on %s: %s", credential.address, error)
        return HostResult.failure(error, timed_out=True)
    except RemoteExecutionError as e:
        # Output is not reported for failed commands
        status = exit_status_from_error(e)
        logger.warning("Command failed on %s (exit_status=%d): %s", credential.address, status, e)
        if e.output:
            logger.debug("Output from %s: %s", credential.address, escape_newlines(e.output))
        return HostResult(
            output="",
            exit_status=status,
            error_text=f"{type(e).__name__}: {e}",
            matched=matcher.test(""),
        )
    except RemoteCommandError as e:
        logger.warning("Cannot run on %s: %s", credential.address, e)
        return HostResult.failure(e)
    except Exception as e:
        logger.error("Unexpected error on %s: %s: %s", credential.address, type(e).__name__, e)
        return HostResult.failure(e)

    output = escape_newlines(raw_output)
    result = HostResult(
        output=output,
        exit_status=0,
        matched=matcher.test(output),
    )
    logger.debug(
        "Command succeeded on %s (matched=%s, %d bytes)",
        credential.address,
        result.matched,
        len(output),
    )
    return result
