"""Protocol interfaces for dependency inversion.

The executor and dispatcher depend on ``CommandRunner`` rather than on the
asyncssh-backed implementation, so tests can substitute a fake transport::

    class FakeRunner:
        async def run(self, credential, command):
            return "hi\\n"

    result = await execute_on_host(FakeRunner(), credential, "echo hi", matcher)
"""

from typing import Protocol, runtime_checkable

from ssh_exporter.models import HostCredential


@runtime_checkable
class CommandRunner(Protocol):
    """Runs one command on one host over a remote shell."""

    async def run(self, credential: HostCredential, command: str) -> str:
        """Run ``command`` on the host described by ``credential``.

        Args:
            credential: Target host, port, user and private key path
            command: Shell command text

        Returns:
            Combined stdout/stderr of a command that exited with status 0

        Raises:
            RemoteConnectionError: If the connection could not be established
            RemoteAuthError: If the key could not be loaded or was rejected
            RemoteExecutionError: If the command failed or exited non-zero
        """
        ...
