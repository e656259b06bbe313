"""Kinematic bicycle vehicle simulator with raster LIDAR."""

from lidar_car_sim.config import (
    InitialConditions,
    VehicleConfig,
    load_vehicle_params,
    merge_params,
)
from lidar_car_sim.control import (
    ControlShapeError,
    SteeringAccelerationCommand,
    SteeringCommand,
)
from lidar_car_sim.dynamics import bicycle_model_derivative, create_vehicle_polygon
from lidar_car_sim.io import JsonSimulationLogRepository, SimulationLog, SimulationStep
from lidar_car_sim.sensor import BoundaryHit, LidarConvergenceError, LidarSensor, line_search
from lidar_car_sim.solver import IntegrationError, dopri_integrate
from lidar_car_sim.state import KinematicState, LidarPoint
from lidar_car_sim.track import ObstacleField, RasterObstacleField
from lidar_car_sim.vehicle import VehicleSnapshot, rollout

__all__ = [
    "BoundaryHit",
    "ControlShapeError",
    "InitialConditions",
    "IntegrationError",
    "JsonSimulationLogRepository",
    "KinematicState",
    "LidarConvergenceError",
    "LidarPoint",
    "LidarSensor",
    "ObstacleField",
    "RasterObstacleField",
    "SimulationLog",
    "SimulationStep",
    "SteeringAccelerationCommand",
    "SteeringCommand",
    "VehicleConfig",
    "VehicleSnapshot",
    "bicycle_model_derivative",
    "create_vehicle_polygon",
    "dopri_integrate",
    "line_search",
    "load_vehicle_params",
    "merge_params",
    "rollout",
]
