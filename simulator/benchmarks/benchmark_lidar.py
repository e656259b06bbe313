#!/usr/bin/env python3
"""Benchmark script for LIDAR boundary search performance.

Measures scan time against a synthetic ring-shaped track raster for several
ray counts and raster resolutions.
"""

import argparse
import json
import math
import time
from pathlib import Path

import numpy as np
from lidar_car_sim.config import VehicleConfig
from lidar_car_sim.logging_utils import configure_logging
from lidar_car_sim.sensor import LidarSensor
from lidar_car_sim.state import KinematicState
from lidar_car_sim.track import RasterObstacleField


def create_ring_track(
    size_px: int, inner_ratio: float = 0.3, outer_ratio: float = 0.45
) -> np.ndarray:
    """Create a square RGB raster with a free ring between two obstacle regions.

    Args:
        size_px: Raster width and height [px]
        inner_ratio: Inner ring radius relative to size
        outer_ratio: Outer ring radius relative to size

    Returns:
        Array of shape (size_px, size_px, 3), obstacle pixels 0, free pixels 255
    """
    center = size_px / 2.0
    rows, cols = np.mgrid[0:size_px, 0:size_px]
    radius = np.hypot(cols + 0.5 - center, rows + 0.5 - center)
    free = (radius >= inner_ratio * size_px) & (radius <= outer_ratio * size_px)

    pixels = np.zeros((size_px, size_px, 3), dtype=np.uint8)
    pixels[free] = 255
    return pixels


def benchmark_lidar_scan(
    num_rays: int,
    size_px: int,
    pixel_size: float,
    num_iterations: int = 100,
) -> dict:
    """Benchmark LIDAR scan performance.

    Args:
        num_rays: Number of rays spread over 180 degrees
        size_px: Raster size [px]
        pixel_size: World units per pixel
        num_iterations: Number of iterations to run

    Returns:
        Dictionary with benchmark results
    """
    # Setup
    directions = tuple(np.linspace(-math.pi / 2, math.pi / 2, num_rays).tolist())
    field = RasterObstacleField(create_ring_track(size_px))
    config = VehicleConfig(track=field, pixel_size=pixel_size, lidar_directions=directions)
    sensor = LidarSensor(config)

    # Vehicle in the middle of the ring, driving counterclockwise
    ring_radius = 0.375 * size_px * pixel_size
    center = size_px * pixel_size / 2.0
    state = KinematicState(x=center + ring_radius, y=center, heading=math.pi / 2, speed=10.0)

    # Warmup
    for _ in range(5):
        sensor.scan(state)

    # Benchmark
    times = []
    for _ in range(num_iterations):
        start = time.perf_counter()
        sensor.scan(state)
        end = time.perf_counter()
        times.append(end - start)

    times_array = np.array(times)

    return {
        "num_rays": num_rays,
        "size_px": size_px,
        "num_iterations": num_iterations,
        "mean_time_ms": float(np.mean(times_array) * 1000),
        "std_time_ms": float(np.std(times_array) * 1000),
        "min_time_ms": float(np.min(times_array) * 1000),
        "max_time_ms": float(np.max(times_array) * 1000),
        "median_time_ms": float(np.median(times_array) * 1000),
        "p95_time_ms": float(np.percentile(times_array, 95) * 1000),
        "total_time_s": float(np.sum(times_array)),
    }


def print_results(results: list[dict]) -> None:
    """Print benchmark results in a formatted table."""
    print("\n" + "=" * 90)
    print("LIDAR Boundary Search Benchmark Results")
    print("=" * 90)
    print(
        f"{'Rays':<8} {'Size':<8} {'Mean (ms)':<12} {'Std (ms)':<12} "
        f"{'Min (ms)':<12} {'Max (ms)':<12} {'P95 (ms)':<12}"
    )
    print("-" * 90)

    for result in results:
        print(
            f"{result['num_rays']:<8} "
            f"{result['size_px']:<8} "
            f"{result['mean_time_ms']:<12.3f} "
            f"{result['std_time_ms']:<12.3f} "
            f"{result['min_time_ms']:<12.3f} "
            f"{result['max_time_ms']:<12.3f} "
            f"{result['p95_time_ms']:<12.3f}"
        )

    print("=" * 90)


def main() -> None:
    """Run benchmark."""
    parser = argparse.ArgumentParser(description="Benchmark LIDAR boundary search performance")
    parser.add_argument(
        "--output",
        type=Path,
        help="Output JSON file for results",
    )
    parser.add_argument(
        "--iterations",
        type=int,
        default=100,
        help="Number of iterations per configuration (default: 100)",
    )
    parser.add_argument(
        "--pixel-size",
        type=float,
        default=0.1,
        help="World units per pixel (default: 0.1)",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args()
    configure_logging("DEBUG" if args.verbose else "INFO")

    ray_counts = [5, 15, 45, 135]
    sizes = [200, 800, 2000]

    results = []
    total_configs = len(ray_counts) * len(sizes)
    current = 0

    for size_px in sizes:
        for num_rays in ray_counts:
            current += 1
            print(f"\n[{current}/{total_configs}] Benchmarking: rays={num_rays}, size={size_px}px")

            result = benchmark_lidar_scan(
                num_rays=num_rays,
                size_px=size_px,
                pixel_size=args.pixel_size,
                num_iterations=args.iterations,
            )
            results.append(result)

            print(f"  Mean: {result['mean_time_ms']:.3f} ms +/- {result['std_time_ms']:.3f} ms")

    print_results(results)

    if args.output:
        with args.output.open("w") as f:
            json.dump(results, f, indent=2)
        print(f"\nResults saved to: {args.output}")


if __name__ == "__main__":
    main()
