from __future__ import annotations

from typing import Optional

import numpy as np

from hardware.ports import HardwareError, PortRegistry
from hardware.serial_link import MotorLink
from util.logging_utils import get_robot_logger

logger = get_robot_logger(__name__)


class MotorController:
    """Exclusive handle on the motor driver at one port.

    The port is claimed on construction; an invalid or already claimed port
    raises and the handle is never created.
    """

    def __init__(
        self,
        port: int,
        link: MotorLink,
        registry: Optional[PortRegistry] = None,
        label: Optional[str] = None,
    ) -> None:
        self.registry = registry or PortRegistry.default()
        self.label = label or f"motor{port}"
        self.registry.claim(port, self.label)
        self.port = port
        self.link = link
        self._speed = 0.0
        self._inverted = False
        self._disabled = False
        self._closed = False

    def __repr__(self) -> str:
        return f"MotorController(port={self.port}, label={self.label!r})"

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def disabled(self) -> bool:
        return self._disabled

    def set(self, speed: float) -> None:
        """Command an output in [-1, 1]; values outside are clamped.

        NaN and infinite speeds raise ValueError and leave the output as is.
        """
        if self._closed:
            raise HardwareError(f"{self!r} is closed")
        speed = float(speed)
        if not np.isfinite(speed):
            raise ValueError(f"{self.label}: speed must be finite, got {speed}")
        speed = float(np.clip(speed, -1.0, 1.0))
        self._speed = speed
        self._disabled = False
        self.link.write_output(self.port, -speed if self._inverted else speed)

    def get(self) -> float:
        return self._speed

    def set_inverted(self, inverted: bool) -> None:
        self._inverted = bool(inverted)

    def get_inverted(self) -> bool:
        return self._inverted

    def stop_motor(self) -> None:
        if self._closed:
            return
        self._speed = 0.0
        self.link.write_output(self.port, 0.0)

    def disable(self) -> None:
        self.stop_motor()
        self._disabled = True

    def close(self) -> None:
        """Stop the motor and give the port back."""
        if self._closed:
            return
        self.stop_motor()
        self._closed = True
        self.registry.release(self.port)
        logger.debug("[Motor] %s closed", self.label)
