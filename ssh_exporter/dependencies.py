"""Dependency container for ssh_exporter.

Holds the process-wide collaborators. Nothing here carries probe results:
each request loads its own ``ProbeConfig`` and passes it explicitly
through the dispatcher and formatter.
"""

from collections import Counter
from dataclasses import dataclass, field

from ssh_exporter.config import Settings
from ssh_exporter.middleware.timing import TimingRegistry
from ssh_exporter.protocols import CommandRunner
from ssh_exporter.services.dispatcher import BatchDispatcher
from ssh_exporter.services.pool import WorkerPool
from ssh_exporter.services.runner import SSHRunner


@dataclass
class Dependencies:
    """Container for ssh_exporter dependencies.

    Example:
        deps = Dependencies.create(Settings.from_env())
        config = await deps.dispatcher.run(load_config(path), "echo.*")
    """

    settings: Settings
    runner: CommandRunner
    pool: WorkerPool
    timing: TimingRegistry = field(default_factory=TimingRegistry)
    error_counts: Counter[str] = field(default_factory=Counter)
    host_outcomes: Counter[str] = field(default_factory=Counter)

    @property
    def dispatcher(self) -> BatchDispatcher:
        """Dispatcher bound to this container's runner and pool."""
        return BatchDispatcher(self.runner, self.pool)

    @classmethod
    def create(cls, settings: Settings) -> "Dependencies":
        """Create dependencies from settings.

        Args:
            settings: Process settings

        Returns:
            Initialized Dependencies instance
        """
        runner = SSHRunner(
            known_hosts=settings.known_hosts,
            connect_timeout=settings.connect_timeout,
        )
        pool = WorkerPool(max_size=settings.max_concurrency)
        return cls(settings=settings, runner=runner, pool=pool)
