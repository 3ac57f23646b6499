"""Thermostat listing and status models."""

from __future__ import annotations

from pydantic import Field

from pysensi.models._base import SensiBaseModel


class Thermostat(SensiBaseModel):
    """A thermostat entry from ``/api/thermostats``.

    ``icd`` is the device identifier used for subscriptions.
    """

    icd: str = Field(alias="ICD")
    device_name: str | None = None
    time_zone: str | None = None
    contractor_id: int | None = None
    address1: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    country: str | None = None


class Temperature(SensiBaseModel):
    f: float | None = None
    c: float | None = None


class RunningStatus(SensiBaseModel):
    mode: str | None = None


class OperationalStatus(SensiBaseModel):
    running: RunningStatus | None = None
    temperature: Temperature | None = None
    humidity: float | None = None
    battery_voltage: float | None = None


class EnvironmentControls(SensiBaseModel):
    cool_setpoint: Temperature | None = None
    heat_setpoint: Temperature | None = None
    system_mode: str | None = None
    hold_mode: str | None = None
    fan_mode: str | None = None
    schedule_mode: str | None = None


class ThermostatStatus(SensiBaseModel):
    """Typed read-only view of a merged thermostat state snapshot.

    Every section is optional: the snapshot only holds what the service
    has pushed so far.
    """

    icd: str | None = Field(default=None, alias="ICD")
    timestamp: int | None = None
    operational_status: OperationalStatus | None = None
    environment_controls: EnvironmentControls | None = None

    @property
    def running_mode(self) -> str | None:
        status = self.operational_status
        if status is None or status.running is None:
            return None
        return status.running.mode

    @property
    def cool_setpoint_f(self) -> float | None:
        controls = self.environment_controls
        if controls is None or controls.cool_setpoint is None:
            return None
        return controls.cool_setpoint.f

    @property
    def heat_setpoint_f(self) -> float | None:
        controls = self.environment_controls
        if controls is None or controls.heat_setpoint is None:
            return None
        return controls.heat_setpoint.f
