"""Immutable vehicle snapshot and the simulate step."""

import dataclasses
import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import numpy as np

from lidar_car_sim.config import InitialConditions, VehicleConfig
from lidar_car_sim.control import ControlPolicy, apply_limits, parse_control_input
from lidar_car_sim.dynamics import bicycle_model_derivative, create_vehicle_polygon
from lidar_car_sim.sensor import LidarSensor
from lidar_car_sim.solver import dopri_integrate
from lidar_car_sim.state import KinematicState, LidarPoint

if TYPE_CHECKING:
    from shapely.geometry import Polygon

logger = logging.getLogger(__name__)

STATE_KEYS = ("x", "y", "heading", "speed")
INTEGRATION_TOLERANCE = 1e-4


@dataclass(frozen=True)
class VehicleSnapshot:
    """One instant of a simulated vehicle.

    Bundles the configuration, the kinematic state, the LIDAR readings taken
    from that state and the elapsed simulation time. Snapshots are never
    modified; ``simulate`` returns a successor and leaves ``self`` valid, so a
    control policy can be handed the live snapshot as a read-only argument.
    """

    config: VehicleConfig
    state: KinematicState
    lidar_points: tuple[LidarPoint, ...]
    t: float = 0.0
    steering: float = 0.0  # effective steering of the step that produced this snapshot [rad]
    acceleration: float = 0.0  # effective acceleration of that step [m/s^2]

    @classmethod
    def create(
        cls, params: Mapping[str, Any] | None = None, **overrides: Any
    ) -> "VehicleSnapshot":
        """Build the initial snapshot from parameter overrides.

        Every field not supplied falls back to its default (see VehicleConfig and
        KinematicState). LIDAR points are computed immediately.

        Args:
            params: Mapping of config fields, state fields (x, y, heading, speed) and t
            **overrides: Same keys as params; take precedence over params

        Returns:
            VehicleSnapshot

        Raises:
            pydantic.ValidationError: If the configuration or the initial state is invalid
        """
        merged = {**(params or {}), **overrides}
        initial = InitialConditions(
            **{key: merged.pop(key) for key in (*STATE_KEYS, "t") if key in merged}
        )

        config = VehicleConfig(**merged)
        return cls.from_state(config, initial.to_state(), t=initial.t)

    @classmethod
    def from_state(
        cls,
        config: VehicleConfig,
        state: KinematicState,
        t: float = 0.0,
        steering: float = 0.0,
        acceleration: float = 0.0,
    ) -> "VehicleSnapshot":
        """Build a sensor-consistent snapshot for the given state."""
        lidar_points = LidarSensor(config).scan(state)
        return cls(
            config=config,
            state=state,
            lidar_points=lidar_points,
            t=t,
            steering=steering,
            acceleration=acceleration,
        )

    # Convenience accessors mirroring the state
    @property
    def x(self) -> float:
        return self.state.x

    @property
    def y(self) -> float:
        return self.state.y

    @property
    def heading(self) -> float:
        return self.state.heading

    @property
    def speed(self) -> float:
        return self.state.speed

    def simulate(self, dt: float, control_policy: ControlPolicy) -> "VehicleSnapshot":
        """Advance the vehicle by dt under the given control policy.

        Args:
            dt: Time step [s]
            control_policy: Called once with this snapshot; returns a number
                (constant-speed mode) or {steering, acceleration}

        Returns:
            Successor snapshot at t + dt

        Raises:
            ControlShapeError: If the policy output does not fit the control mode
            LidarConvergenceError: If a LIDAR boundary search does not converge
            IntegrationError: If the integrator cannot complete the step
        """
        raw = control_policy(self)
        command = parse_control_input(raw, self.config.constant_speed)
        steering, acceleration = apply_limits(command, self.config)

        if steering != command.steering:
            logger.debug(
                f"Steering clamped: {command.steering} -> {steering}",
                extra={"sim_time": self.t},
            )

        lf = self.config.lf
        lr = self.config.lr

        def ode(_t: float, y: np.ndarray) -> np.ndarray:
            return bicycle_model_derivative(y, steering, acceleration, lf, lr)

        solution = dopri_integrate(
            self.state.to_array(),
            dt,
            ode,
            rtol=INTEGRATION_TOLERANCE,
            atol=INTEGRATION_TOLERANCE,
        )
        next_state = KinematicState.from_array(solution)

        return VehicleSnapshot.from_state(
            self.config,
            next_state,
            t=self.t + dt,
            steering=steering,
            acceleration=acceleration,
        )

    def footprint(self) -> "Polygon":
        """Vehicle body rectangle in world coordinates."""
        return create_vehicle_polygon(
            self.state.x,
            self.state.y,
            self.state.heading,
            self.config.length,
            self.config.width,
        )

    def to_dict(self) -> dict[str, Any]:
        """Structured representation of state, control, sensor readings and time."""
        return {
            "t": self.t,
            "state": dataclasses.asdict(self.state),
            "steering": self.steering,
            "acceleration": self.acceleration,
            "lidar_points": [dataclasses.asdict(p) for p in self.lidar_points],
        }

    def info_text(self) -> str:
        """Human-readable dump of state and sensor readings."""
        lines = [
            f"/* Position      */ vehicle.x       = {_fmt(self.state.x)}",
            f"                    vehicle.y       = {_fmt(self.state.y)}",
            f"/* Speed         */ vehicle.speed   = {_fmt(self.state.speed)}",
            f"/* Heading       */ vehicle.heading = {_fmt(self.state.heading)}",
            "/* LIDAR sensors */",
        ]
        for i, p in enumerate(self.lidar_points):
            lines.append(
                f"vehicle.lidarPoints[{i}] = {{"
                f"x: {_fmt(p.x):>8}, "
                f"y: {_fmt(p.y):>8}, "
                f"distance: {_fmt(p.distance):>8}, "
                f"direction: {_fmt(p.direction):>8}"
                "}"
            )
        lines.append(f"/* Simulation time */ vehicle.T  = {_fmt(self.t)}")
        return "\n".join(lines)


def _fmt(value: float) -> str:
    """Round half up to 2 decimals without trailing zeros (16.40 -> 16.4, 0.125 -> 0.13)."""
    if math.isfinite(value):
        value = math.floor(value * 100 + 0.5) / 100
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def rollout(
    snapshot: VehicleSnapshot, dt: float, control_policy: ControlPolicy, num_steps: int
) -> list[VehicleSnapshot]:
    """Apply simulate num_steps times.

    Args:
        snapshot: Starting snapshot
        dt: Time step [s]
        control_policy: Control policy
        num_steps: Number of steps

    Returns:
        The snapshot chain, starting snapshot included (num_steps + 1 entries)
    """
    chain = [snapshot]
    for _ in range(num_steps):
        chain.append(chain[-1].simulate(dt, control_policy))
    logger.debug(f"Rollout finished: {num_steps} steps", extra={"sim_time": chain[-1].t})
    return chain
