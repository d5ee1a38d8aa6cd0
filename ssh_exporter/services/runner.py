"""Remote command runner backed by asyncssh.

Every call opens its own connection, runs exactly one command and closes
the connection again, on success, failure and cancellation alike.
"""

import asyncio
import logging

import asyncssh

from ssh_exporter.models import HostCredential

logger = logging.getLogger(__name__)


class RemoteCommandError(Exception):
    """Base class for failures running a command on a remote host."""

    def __init__(self, host: str, original_error: Exception | str):
        """Initialize remote error.

        Args:
            host: Address of the remote host
            original_error: Underlying exception or failure detail
        """
        self.host = host
        self.original_error = original_error
        super().__init__(f"{host}: {original_error}")


class RemoteConnectionError(RemoteCommandError):
    """Could not connect to the remote host."""


class RemoteAuthError(RemoteCommandError):
    """Private key could not be loaded or was rejected."""


class RemoteTimeoutError(RemoteCommandError):
    """Execution was abandoned after the script timeout elapsed."""


class RemoteExecutionError(RemoteCommandError):
    """Command could not be run or exited with a non-zero status."""

    def __init__(
        self,
        host: str,
        original_error: Exception | str,
        exit_status: int | None = None,
        output: str = "",
    ):
        super().__init__(host, original_error)
        self.exit_status = exit_status
        self.output = output


class SSHRunner:
    """Run commands over SSH with private key authentication."""

    def __init__(
        self,
        known_hosts: str | None = None,
        connect_timeout: float = 10,
    ) -> None:
        """Initialize runner.

        Args:
            known_hosts: Path to known_hosts file, or None to skip verification
            connect_timeout: Seconds allowed for the connection handshake
        """
        self._known_hosts = known_hosts
        self.connect_timeout = connect_timeout

        if self._known_hosts is None:
            logger.warning(
                "SSH host key verification DISABLED. "
                "Set SSH_EXPORTER_KNOWN_HOSTS to a known_hosts file to enable it."
            )
        else:
            logger.info("SSH host key verification enabled (known_hosts=%s)", known_hosts)

    def _load_key(self, credential: HostCredential) -> asyncssh.SSHKey:
        if not credential.keyfile:
            raise RemoteAuthError(credential.address, "no keyfile configured")
        try:
            return asyncssh.read_private_key(credential.keyfile)
        except (OSError, asyncssh.KeyImportError) as e:
            raise RemoteAuthError(credential.address, e) from e

    async def run(self, credential: HostCredential, command: str) -> str:
        """Run a command and return its combined output."""
        address = credential.address
        key = self._load_key(credential)

        try:
            port = int(credential.port)
        except ValueError as e:
            raise RemoteConnectionError(address, f"invalid port {credential.port!r}") from e

        logger.debug("Opening SSH connection to %s", address)
        try:
            conn = await asyncssh.connect(
                credential.host,
                port=port,
                username=credential.user,
                client_keys=[key],
                known_hosts=self._known_hosts,
                connect_timeout=self.connect_timeout,
            )
        except asyncssh.PermissionDenied as e:
            raise RemoteAuthError(address, e) from e
        except (OSError, asyncssh.Error, asyncio.TimeoutError) as e:
            raise RemoteConnectionError(address, e) from e

        async with conn:
            try:
                result = await conn.run(command, stderr=asyncssh.STDOUT, check=False)
            except (OSError, asyncssh.Error) as e:
                raise RemoteExecutionError(address, e) from e

        output = _decode(result.stdout)

        if result.exit_status != 0:
            if result.exit_signal:
                detail = f"Process exited with signal {result.exit_signal[0]}"
            else:
                detail = f"Process exited with status {result.exit_status}"
            raise RemoteExecutionError(
                address,
                detail,
                exit_status=result.exit_status,
                output=output,
            )

        logger.debug("Command on %s exited with status 0", address)
        return output


def _decode(data: str | bytes | None) -> str:
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data
