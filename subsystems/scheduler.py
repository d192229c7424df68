from __future__ import annotations

from typing import Optional, Protocol

from util.logging_utils import get_robot_logger

logger = get_robot_logger(__name__)


class Command:
    """Unit of work run by the scheduler. The base command does nothing."""

    def __init__(self, name: Optional[str] = None) -> None:
        self.name = name or type(self).__name__

    def initialize(self) -> None:
        pass

    def execute(self) -> None:
        pass

    def is_finished(self) -> bool:
        return False

    def end(self, interrupted: bool) -> None:
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class DefaultCommandRegistrar(Protocol):
    def set_default_command(self, subsystem: "Subsystem", command: Command) -> None: ...


class Subsystem:
    """Base class for robot subsystems."""

    def __init__(self, name: Optional[str] = None) -> None:
        self.name = name or type(self).__name__

    def init_default_command(self, registrar: DefaultCommandRegistrar) -> None:
        """Register this subsystem's default command, if it has one."""
        pass

    def periodic(self) -> None:
        """Called periodically by the scheduler."""
        pass

    def close(self) -> None:
        """Optional cleanup when shutting down."""
        pass


class CommandScheduler:
    """Very small scheduler that runs each subsystem and its default command."""

    def __init__(self) -> None:
        self._subsystems: list[Subsystem] = []
        self._registrations: list[tuple[Subsystem, Command]] = []
        self._defaults: dict[Subsystem, Command] = {}
        self._initialized: dict[Subsystem, Command] = {}

    @property
    def subsystems(self) -> list[Subsystem]:
        return list(self._subsystems)

    def register(self, subsystem: Subsystem) -> None:
        if any(s is subsystem for s in self._subsystems):
            raise ValueError(f"{subsystem.name} is already registered")
        self._subsystems.append(subsystem)
        subsystem.init_default_command(self)
        logger.info("[Scheduler] Registered %s", subsystem.name)

    def set_default_command(self, subsystem: Subsystem, command: Command) -> None:
        # every call is recorded; a later command replaces the earlier default
        self._registrations.append((subsystem, command))
        previous = self._initialized.get(subsystem)
        if previous is not None and previous is not command:
            previous.end(True)
            del self._initialized[subsystem]
        self._defaults[subsystem] = command
        logger.debug(
            "[Scheduler] Default command for %s: %r", subsystem.name, command
        )

    def registrations_for(self, subsystem: Subsystem) -> list[Command]:
        return [c for s, c in self._registrations if s is subsystem]

    def get_default_command(self, subsystem: Subsystem) -> Optional[Command]:
        return self._defaults.get(subsystem)

    def _run_default(self, subsystem: Subsystem) -> None:
        command = self._defaults.get(subsystem)
        if command is None:
            return
        if subsystem not in self._initialized:
            command.initialize()
            self._initialized[subsystem] = command
        command.execute()
        if command.is_finished():
            command.end(False)
            del self._initialized[subsystem]

    def run(self) -> None:
        for subsystem in list(self._subsystems):
            subsystem.periodic()
            self._run_default(subsystem)

    def shutdown(self) -> None:
        for subsystem, command in self._initialized.items():
            try:
                command.end(True)
            except Exception:
                logger.exception(
                    "[Scheduler] ERROR ending %r on %s", command, subsystem.name
                )
        self._initialized.clear()
        for subsystem in list(self._subsystems):
            try:
                subsystem.close()
            except Exception:
                logger.exception("[Scheduler] ERROR closing %s", subsystem.name)
        self._subsystems.clear()
        self._defaults.clear()
        self._registrations.clear()
