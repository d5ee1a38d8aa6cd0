"""Per-host execution result."""

from dataclasses import dataclass

# Exit status recorded when the command could not be determined to have exited.
UNKNOWN_EXIT_STATUS = -1


@dataclass
class HostResult:
    """Outcome of running one script on one host."""

    output: str = ""
    exit_status: int = UNKNOWN_EXIT_STATUS
    error_text: str = ""
    matched: bool = False
    timed_out: bool = False

    @classmethod
    def failure(cls, error: Exception, timed_out: bool = False) -> "HostResult":
        """Build a result for a host whose command never produced a status."""
        return cls(
            error_text=f"{type(error).__name__}: {error}",
            timed_out=timed_out,
        )
