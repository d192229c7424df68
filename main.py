import time
from typing import Optional

from hardware.ports import PortRegistry
from hardware.serial_link import MotorLink, NullMotorLink, SerialMotorLink
from subsystems.drive import DriveSubsystem
from subsystems.example import ExampleSubsystem
from subsystems.scheduler import CommandScheduler
from util.config import RobotConfig
from util.logging_utils import configure_log_file, get_robot_logger, warn_if_overrun


def open_link(config: RobotConfig) -> MotorLink:
    if config.serial_port:
        return SerialMotorLink(config.serial_port, config.baud_rate)
    return NullMotorLink()


def build_robot(
    config: RobotConfig,
    link: Optional[MotorLink] = None,
    scheduler: Optional[CommandScheduler] = None,
) -> CommandScheduler:
    """Create the subsystems described by ``config`` and register them."""
    if link is None:
        link = open_link(config)
    scheduler = scheduler or CommandScheduler()
    registry = PortRegistry(config.port_count)

    try:
        scheduler.register(DriveSubsystem(link, config.drive_ports, registry))
        if config.enable_example:
            # the example motor shares port 0 with the drive unless reconfigured
            scheduler.register(ExampleSubsystem(link, config.example_ports, registry))
    except Exception:
        scheduler.shutdown()
        raise
    return scheduler


def main(config: Optional[RobotConfig] = None) -> None:
    config = config or RobotConfig.from_env()
    configure_log_file(config.log_file)
    logger = get_robot_logger(__name__)

    link = open_link(config)
    scheduler: Optional[CommandScheduler] = None
    try:
        scheduler = build_robot(config, link)
        logger.info("Robot program starting")
        while True:
            start = time.perf_counter()
            scheduler.run()
            elapsed = time.perf_counter() - start
            warn_if_overrun("scheduler.run", elapsed, config.loop_period)
            time.sleep(max(0.0, config.loop_period - elapsed))
    except KeyboardInterrupt:
        logger.info("Interrupted")
    finally:
        if scheduler is not None:
            scheduler.shutdown()
        link.close()
        logger.info("Robot program exiting")


if __name__ == "__main__":
    main()
