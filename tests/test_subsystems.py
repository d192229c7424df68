from unittest.mock import MagicMock

import pytest

from hardware.ports import PortAllocatedError, PortRegistry
from hardware.serial_link import NullMotorLink
from subsystems.drive import DrivePorts, DriveSubsystem
from subsystems.example import ExamplePorts, ExampleSubsystem
from subsystems.scheduler import Command, CommandScheduler


def test_drive_owns_four_motors(link, registry):
    drive = DriveSubsystem(link, registry=registry)
    ports = {label: motor.port for label, motor in drive.motors.items()}
    assert ports == {
        "front-right": 0,
        "back-right": 1,
        "front-left": 2,
        "back-left": 3,
    }
    assert registry.claimed_ports() == [0, 1, 2, 3]
    assert drive.front_right.port == 0
    assert drive.back_left.port == 3


def test_drive_motor_set_is_fixed(link, registry):
    drive = DriveSubsystem(link, registry=registry)
    with pytest.raises(TypeError):
        drive.motors["extra"] = drive.front_right


def test_drive_ports_are_configurable(link, registry):
    drive = DriveSubsystem(link, DrivePorts(4, 5, 6, 7), registry)
    assert sorted(m.port for m in drive.motors.values()) == [4, 5, 6, 7]


def test_drive_failed_construction_releases_claims(link, registry):
    registry.claim(3, "someone-else")
    with pytest.raises(PortAllocatedError):
        DriveSubsystem(link, registry=registry)
    assert registry.claimed_ports() == [3]


def test_drive_rollback_keeps_original_error_when_link_fails(registry):
    link = MagicMock()
    link.write_output.side_effect = RuntimeError("link down")
    registry.claim(3, "someone-else")
    with pytest.raises(PortAllocatedError):
        DriveSubsystem(link, registry=registry)
    link.write_output.assert_not_called()
    assert registry.claimed_ports() == [3]


def test_example_owns_one_motor(link, registry):
    example = ExampleSubsystem(link, registry=registry)
    assert list(example.motors) == ["front-right"]
    assert example.front_right.port == 0
    assert example.front_right.label == "front-right"
    assert registry.claimed_ports() == [0]


@pytest.mark.parametrize("factory", [DriveSubsystem, ExampleSubsystem])
def test_init_hook_registers_once_per_call(link, registry, factory):
    subsystem = factory(link, registry=registry)
    scheduler = CommandScheduler()

    subsystem.init_default_command(scheduler)
    assert len(scheduler.registrations_for(subsystem)) == 1

    subsystem.init_default_command(scheduler)
    assert len(scheduler.registrations_for(subsystem)) == 2


def test_default_command_factory_is_used(link, registry):
    made = []

    def factory():
        made.append(Command("drive-default"))
        return made[-1]

    drive = DriveSubsystem(link, registry=registry, default_command_factory=factory)
    scheduler = CommandScheduler()
    scheduler.register(drive)
    assert scheduler.get_default_command(drive) is made[0]


def test_tank_drive_and_stop(link, registry):
    drive = DriveSubsystem(link, registry=registry)
    drive.tank_drive(0.5, -0.25)
    assert link.outputs == {2: 0.5, 3: 0.5, 0: -0.25, 1: -0.25}

    drive.periodic()
    drive.stop()
    assert all(value == 0.0 for value in link.outputs.values())


def test_drive_close_releases_ports(link, registry):
    drive = DriveSubsystem(link, registry=registry)
    drive.close()
    assert registry.claimed_ports() == []
    assert all(m.closed for m in drive.motors.values())


def test_subsystems_do_not_share_state():
    drive_link, example_link = NullMotorLink(), NullMotorLink()
    drive_registry, example_registry = PortRegistry(), PortRegistry()
    drive = DriveSubsystem(drive_link, registry=drive_registry)
    example = ExampleSubsystem(example_link, registry=example_registry)

    example.front_right.set(0.7)
    example.close()

    assert not drive.front_right.closed
    assert drive_registry.claimed_ports() == [0, 1, 2, 3]
    assert drive_link.outputs == {}
    drive.front_right.set(0.3)
    assert example_link.outputs == {0: 0.0}


def test_subsystems_on_disjoint_ports_share_registry(link, registry):
    drive = DriveSubsystem(link, registry=registry)
    example = ExampleSubsystem(link, ExamplePorts(front_right=8), registry)
    example.close()
    assert registry.claimed_ports() == [0, 1, 2, 3]
    assert not any(m.closed for m in drive.motors.values())


def test_example_and_drive_collide_on_port_zero(link, registry):
    DriveSubsystem(link, registry=registry)
    with pytest.raises(PortAllocatedError):
        ExampleSubsystem(link, registry=registry)
