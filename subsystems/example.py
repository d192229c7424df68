from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Mapping, Optional

from hardware.motor_controller import MotorController
from hardware.ports import PortRegistry
from hardware.serial_link import MotorLink
from .scheduler import Command, DefaultCommandRegistrar, Subsystem


@dataclass(frozen=True)
class ExamplePorts:
    front_right: int = 0


class ExampleSubsystem(Subsystem):
    """Single motor subsystem kept as a template for new subsystems."""

    def __init__(
        self,
        link: MotorLink,
        ports: Optional[ExamplePorts] = None,
        registry: Optional[PortRegistry] = None,
        default_command_factory: Callable[[], Command] = Command,
    ) -> None:
        super().__init__("Example")
        self.ports = ports or ExamplePorts()
        self._default_command_factory = default_command_factory
        self.front_right = MotorController(
            self.ports.front_right, link, registry, label="front-right"
        )

    @property
    def motors(self) -> Mapping[str, MotorController]:
        return MappingProxyType({"front-right": self.front_right})

    def init_default_command(self, registrar: DefaultCommandRegistrar) -> None:
        registrar.set_default_command(self, self._default_command_factory())

    def close(self) -> None:
        self.front_right.close()
