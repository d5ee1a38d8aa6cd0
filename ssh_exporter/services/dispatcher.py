"""Batch dispatcher: fan selected scripts out to all of their hosts.

Each (script, host) pair runs as its own task. A task writes only into the
``HostCredential`` it was created for, so results land in configuration
order regardless of completion order and the result slots need no lock.
Concurrency is bounded by the ``WorkerPool``; each host execution is
bounded by its script's ``parsed_timeout``, after which the remote session
is closed and the host is recorded as timed out.
"""

import asyncio
import logging
import time

from ssh_exporter.models import HostCredential, ProbeConfig, ScriptSpec
from ssh_exporter.protocols import CommandRunner
from ssh_exporter.services.executor import execute_on_host
from ssh_exporter.services.matcher import (
    CompiledMatcher,
    compile_or_never,
    compile_pattern,
)
from ssh_exporter.services.pool import WorkerPool

logger = logging.getLogger(__name__)


class BatchDispatcher:
    """Run every selected script on every one of its hosts."""

    def __init__(self, runner: CommandRunner, pool: WorkerPool) -> None:
        self.runner = runner
        self.pool = pool

    async def run(
        self,
        config: ProbeConfig,
        name_pattern: CompiledMatcher | str,
    ) -> ProbeConfig:
        """Execute scripts whose name matches ``name_pattern``.

        Args:
            config: Freshly loaded configuration, mutated in place
            name_pattern: Filter applied to script names

        Returns:
            The same configuration with selection flags and results filled in

        Raises:
            InvalidPattern: If ``name_pattern`` is a string that does not compile
        """
        if isinstance(name_pattern, str):
            name_pattern = compile_pattern(name_pattern)

        tasks: list[asyncio.Task[None]] = []
        for script in config.scripts:
            script.selected = name_pattern.test(script.name)
            if not script.selected:
                logger.debug("Ignoring script %s", script.name)
                continue

            matcher = compile_or_never(script.pattern, owner=script.name)
            for credential in script.targets:
                tasks.append(
                    asyncio.create_task(self._execute(script, credential, matcher))
                )

        if not tasks:
            logger.info("No scripts matched %r", name_pattern.pattern)
            return config

        logger.info(
            "Dispatching %d execution(s) across %d script(s)",
            len(tasks),
            len(config.selected_scripts),
        )
        start = time.perf_counter()
        await asyncio.gather(*tasks)
        logger.info(
            "All %d execution(s) completed in %.1fms",
            len(tasks),
            (time.perf_counter() - start) * 1000,
        )
        return config

    async def _execute(
        self,
        script: ScriptSpec,
        credential: HostCredential,
        matcher: CompiledMatcher,
    ) -> None:
        async with self.pool.slot():
            result = await execute_on_host(
                self.runner,
                credential,
                script.command,
                matcher,
                timeout=script.parsed_timeout,
            )
        credential.record(result)


def outcome_counts(config: ProbeConfig) -> dict[str, int]:
    """Count host outcomes of a dispatched configuration.

    Returns:
        Mapping of ``ok``, ``failed`` and ``timeout`` to host counts
    """
    counts = {"ok": 0, "failed": 0, "timeout": 0}
    for script in config.selected_scripts:
        for credential in script.targets:
            if credential.timed_out:
                counts["timeout"] += 1
            elif credential.exit_status == 0:
                counts["ok"] += 1
            else:
                counts["failed"] += 1
    return counts
