from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from subsystems.drive import DrivePorts
from subsystems.example import ExamplePorts

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean, got {value!r}")


@dataclass
class RobotConfig:
    """Configuration for the robot program."""
    serial_port: Optional[str] = None  # None runs without hardware
    baud_rate: int = 9600
    loop_period: float = 0.02  # seconds, 50 Hz
    port_count: int = 16
    enable_example: bool = False
    log_file: str = "robot.log"
    drive_ports: DrivePorts = field(default_factory=DrivePorts)
    example_ports: ExamplePorts = field(default_factory=ExamplePorts)

    def __post_init__(self) -> None:
        if self.loop_period <= 0:
            raise ValueError("loop_period must be positive")
        if self.baud_rate <= 0:
            raise ValueError("baud_rate must be positive")
        if self.port_count <= 0:
            raise ValueError("port_count must be positive")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "RobotConfig":
        """Build a config from ``ROBOT_*`` environment variables.

        Recognised: ROBOT_SERIAL_PORT, ROBOT_BAUD_RATE, ROBOT_LOOP_PERIOD,
        ROBOT_PORT_COUNT, ROBOT_ENABLE_EXAMPLE, ROBOT_LOG_FILE and
        ROBOT_DRIVE_PORTS (four comma separated ints: FR,BR,FL,BL).
        """
        env = os.environ if environ is None else environ
        kwargs: dict = {}
        if env.get("ROBOT_SERIAL_PORT"):
            kwargs["serial_port"] = env["ROBOT_SERIAL_PORT"]
        if "ROBOT_BAUD_RATE" in env:
            kwargs["baud_rate"] = int(env["ROBOT_BAUD_RATE"])
        if "ROBOT_LOOP_PERIOD" in env:
            kwargs["loop_period"] = float(env["ROBOT_LOOP_PERIOD"])
        if "ROBOT_PORT_COUNT" in env:
            kwargs["port_count"] = int(env["ROBOT_PORT_COUNT"])
        if "ROBOT_ENABLE_EXAMPLE" in env:
            kwargs["enable_example"] = _parse_bool(
                "ROBOT_ENABLE_EXAMPLE", env["ROBOT_ENABLE_EXAMPLE"]
            )
        if env.get("ROBOT_LOG_FILE"):
            kwargs["log_file"] = env["ROBOT_LOG_FILE"]
        if env.get("ROBOT_DRIVE_PORTS"):
            values = [int(p) for p in env["ROBOT_DRIVE_PORTS"].split(",")]
            if len(values) != 4:
                raise ValueError("ROBOT_DRIVE_PORTS needs exactly four ports")
            kwargs["drive_ports"] = DrivePorts(*values)
        return cls(**kwargs)
