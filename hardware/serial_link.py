from __future__ import annotations

import time
from typing import Callable, Optional, Protocol

import serial

from hardware.ports import HardwareError
from util.logging_utils import get_robot_logger

logger = get_robot_logger(__name__)

SET_TARGET = 0x84


class MotorLinkError(HardwareError):
    pass


class MotorLink(Protocol):
    """Transport that carries motor outputs to the motor drivers."""

    def write_output(self, channel: int, value: float) -> None: ...

    def close(self) -> None: ...


def encode_packet(channel: int, value: float) -> bytes:
    """Encode ``value`` in [-1, 1] as a set-target packet for ``channel``."""
    raw = int(((value + 1.0) / 2.0) * 255)
    raw = max(0, min(255, raw))
    lsb = raw & 0x7F
    msb = (raw >> 7) & 0x7F
    return bytes([SET_TARGET, channel, lsb, msb])


class SerialMotorLink:
    """Sends motor outputs to a motor driver board over a serial port."""

    def __init__(
        self,
        port: str,
        baud_rate: int = 9600,
        retry_delay: float = 1.0,
        max_attempts: Optional[int] = None,
        serial_factory: Callable[..., serial.Serial] = serial.Serial,
    ) -> None:
        self.port = port
        self.baud_rate = baud_rate
        self.retry_delay = retry_delay
        self.max_attempts = max_attempts
        self._serial_factory = serial_factory
        self.ser = self._connect()

    def _connect(self) -> serial.Serial:
        """Keep trying to open the serial port until successful."""
        attempt = 0
        while True:
            attempt += 1
            try:
                ser = self._serial_factory(
                    port=self.port, baudrate=self.baud_rate, timeout=1
                )
                logger.info(
                    "[Serial] Connected to %s @ %sbps", self.port, self.baud_rate
                )
                return ser
            except (serial.SerialException, OSError) as e:
                if self.max_attempts is not None and attempt >= self.max_attempts:
                    raise MotorLinkError(
                        f"Could not open {self.port} after {attempt} attempts"
                    ) from e
                logger.error(
                    "[Serial] ERROR opening %s: %s. Retrying in %ss…",
                    self.port,
                    e,
                    self.retry_delay,
                )
                time.sleep(self.retry_delay)

    def write_output(self, channel: int, value: float) -> None:
        packet = encode_packet(channel, value)
        try:
            self.ser.write(packet)
        except (serial.SerialException, OSError) as e:
            logger.error(
                "[Serial] ERROR sending to channel %s: %s. Reconnecting…", channel, e
            )
            try:
                self.ser.close()
            finally:
                self.ser = self._connect()
            self.ser.write(packet)

    def close(self) -> None:
        if self.ser:
            self.ser.close()
            logger.info("[Serial] Closed %s", self.port)


class NullMotorLink:
    """Keeps outputs in memory; used when no driver board is attached."""

    def __init__(self) -> None:
        self.outputs: dict[int, float] = {}
        self.history: list[tuple[int, float]] = []
        self.closed = False

    def write_output(self, channel: int, value: float) -> None:
        self.outputs[channel] = value
        self.history.append((channel, value))

    def close(self) -> None:
        self.closed = True
