"""JSON-based simulation log storage."""

import json
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from lidar_car_sim.vehicle import VehicleSnapshot

logger = logging.getLogger(__name__)


class SimulationStep(BaseModel):
    """1スナップショット分のログ."""

    t: float  # シミュレーション時刻 [s]
    x: float  # X座標 [m]
    y: float  # Y座標 [m]
    heading: float  # 方位角 [rad]
    speed: float  # 速度 [m/s]
    steering: float = 0.0  # 適用されたステアリング角 [rad]
    acceleration: float = 0.0  # 適用された加速度 [m/s^2]
    lidar_distances: list[float] = Field(default_factory=list)
    lidar_directions: list[float] = Field(default_factory=list)

    @classmethod
    def from_snapshot(cls, snapshot: VehicleSnapshot) -> "SimulationStep":
        return cls(
            t=snapshot.t,
            x=snapshot.state.x,
            y=snapshot.state.y,
            heading=snapshot.state.heading,
            speed=snapshot.state.speed,
            steering=snapshot.steering,
            acceleration=snapshot.acceleration,
            lidar_distances=[p.distance for p in snapshot.lidar_points],
            lidar_directions=[p.direction for p in snapshot.lidar_points],
        )


class SimulationLog(BaseModel):
    """Sequence of logged snapshots with free-form metadata."""

    steps: list[SimulationStep] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_snapshots(
        cls, snapshots: Sequence[VehicleSnapshot], metadata: dict[str, Any] | None = None
    ) -> "SimulationLog":
        """Build a log from a snapshot chain.

        The vehicle configuration of the first snapshot (without the obstacle
        predicate and the track) is stored under ``metadata["vehicle_config"]``.
        """
        meta = dict(metadata or {})
        if snapshots:
            meta.setdefault(
                "vehicle_config",
                snapshots[0].config.model_dump(exclude={"is_obstacle", "track"}),
            )
        return cls(steps=[SimulationStep.from_snapshot(s) for s in snapshots], metadata=meta)


class JsonSimulationLogRepository:
    """JSON-based simulation log repository.

    Saves and loads simulation logs in JSON format for debugging and analysis.
    """

    def save(self, log: SimulationLog, file_path: Path) -> bool:
        """Save simulation log to JSON file.

        Args:
            log: Simulation log to save
            file_path: Output file path

        Returns:
            bool: 保存が成功した場合True
        """
        with open(file_path, "w", encoding="utf-8") as f:
            json.dump(log.model_dump(mode="json"), f, indent=2)

        logger.info(f"Saved simulation log ({len(log.steps)} steps) to {file_path}")
        return True

    def load(self, file_path: Path) -> SimulationLog:
        """Load simulation log from JSON file.

        Args:
            file_path: Input file path

        Returns:
            SimulationLog object

        Raises:
            FileNotFoundError: If the file does not exist
            pydantic.ValidationError: If the content is not a valid log
        """
        with open(file_path, encoding="utf-8") as f:
            data = json.load(f)

        return SimulationLog.model_validate(data)
