from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Mapping, Optional

from hardware.motor_controller import MotorController
from hardware.ports import PortRegistry
from hardware.serial_link import MotorLink
from .scheduler import Command, DefaultCommandRegistrar, Subsystem
from util.logging_utils import get_robot_logger

logger = get_robot_logger(__name__)


@dataclass(frozen=True)
class DrivePorts:
    """Motor ports of the four drivetrain corners."""
    front_right: int = 0
    back_right: int = 1
    front_left: int = 2
    back_left: int = 3

    def as_dict(self) -> dict[str, int]:
        return {
            "front-right": self.front_right,
            "back-right": self.back_right,
            "front-left": self.front_left,
            "back-left": self.back_left,
        }


class DriveSubsystem(Subsystem):
    """Subsystem owning the four drivetrain motor controllers."""

    def __init__(
        self,
        link: MotorLink,
        ports: Optional[DrivePorts] = None,
        registry: Optional[PortRegistry] = None,
        default_command_factory: Callable[[], Command] = Command,
    ) -> None:
        super().__init__("Drive")
        self.ports = ports or DrivePorts()
        self._default_command_factory = default_command_factory
        motors: dict[str, MotorController] = {}
        try:
            for label, port in self.ports.as_dict().items():
                motors[label] = MotorController(port, link, registry, label=label)
        except Exception:
            # nothing has been written yet, so only the claims need undoing
            for motor in motors.values():
                motor.registry.release(motor.port)
            raise
        self._motors = MappingProxyType(motors)
        logger.info("[Drive] Motors on ports %s", self.ports.as_dict())

    @property
    def motors(self) -> Mapping[str, MotorController]:
        return self._motors

    @property
    def front_right(self) -> MotorController:
        return self._motors["front-right"]

    @property
    def back_right(self) -> MotorController:
        return self._motors["back-right"]

    @property
    def front_left(self) -> MotorController:
        return self._motors["front-left"]

    @property
    def back_left(self) -> MotorController:
        return self._motors["back-left"]

    # -------------------------------------------------------------- subsystem
    def init_default_command(self, registrar: DefaultCommandRegistrar) -> None:
        registrar.set_default_command(self, self._default_command_factory())

    def periodic(self) -> None:
        logger.debug(
            "[Drive] FL:%.2f FR:%.2f BL:%.2f BR:%.2f",
            self.front_left.get(),
            self.front_right.get(),
            self.back_left.get(),
            self.back_right.get(),
        )

    def close(self) -> None:
        for motor in self._motors.values():
            motor.close()
        logger.info("[Drive] Closed")

    # -------------------------------------------------------------- commands
    def tank_drive(self, left: float, right: float) -> None:
        self.front_left.set(left)
        self.back_left.set(left)
        self.front_right.set(right)
        self.back_right.set(right)

    def stop(self) -> None:
        for motor in self._motors.values():
            motor.stop_motor()
