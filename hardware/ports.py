from __future__ import annotations

from threading import Lock
from typing import Optional

from util.logging_utils import get_robot_logger

logger = get_robot_logger(__name__)


class HardwareError(Exception):
    """Base class for hardware layer failures."""


class InvalidPortError(HardwareError, ValueError):
    pass


class PortAllocatedError(HardwareError):
    pass


class PortRegistry:
    """Tracks which motor ports have been claimed and by whom.

    A port may only have one owner at a time. Claims last until the port is
    released, normally when the owning handle is closed.
    """

    _default: Optional["PortRegistry"] = None
    _default_lock = Lock()

    def __init__(self, port_count: int = 16) -> None:
        if port_count <= 0:
            raise ValueError("port_count must be positive")
        self.port_count = port_count
        self._owners: dict[int, str] = {}
        self._lock = Lock()

    @classmethod
    def default(cls) -> "PortRegistry":
        """Process wide registry used when none is passed explicitly."""
        with cls._default_lock:
            if cls._default is None:
                cls._default = cls()
            return cls._default

    def _check(self, port: int) -> None:
        # bool is an int subclass but never a valid port
        if isinstance(port, bool) or not isinstance(port, int):
            raise InvalidPortError(f"Port must be an int, got {port!r}")
        if not 0 <= port < self.port_count:
            raise InvalidPortError(
                f"Port {port} out of range [0, {self.port_count})"
            )

    def claim(self, port: int, owner: str) -> None:
        self._check(port)
        with self._lock:
            current = self._owners.get(port)
            if current is not None:
                raise PortAllocatedError(
                    f"Port {port} already claimed by {current}"
                )
            self._owners[port] = owner
        logger.debug("[Ports] %s claimed port %s", owner, port)

    def release(self, port: int) -> None:
        with self._lock:
            owner = self._owners.pop(port, None)
        if owner is not None:
            logger.debug("[Ports] %s released port %s", owner, port)

    def is_claimed(self, port: int) -> bool:
        with self._lock:
            return port in self._owners

    def owner_of(self, port: int) -> Optional[str]:
        with self._lock:
            return self._owners.get(port)

    def claimed_ports(self) -> list[int]:
        with self._lock:
            return sorted(self._owners)
