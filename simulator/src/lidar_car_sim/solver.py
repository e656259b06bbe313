"""Numerical integration methods for the simulator."""

import logging
from collections.abc import Callable

import numpy as np

logger = logging.getLogger(__name__)

DerivativeFunc = Callable[[float, np.ndarray], np.ndarray]

# Dormand-Prince 5(4) tableau
_C = (0.0, 1 / 5, 3 / 10, 4 / 5, 8 / 9, 1.0)
_A = (
    (),
    (1 / 5,),
    (3 / 40, 9 / 40),
    (44 / 45, -56 / 15, 32 / 9),
    (19372 / 6561, -25360 / 2187, 64448 / 6561, -212 / 729),
    (9017 / 3168, -355 / 33, 46732 / 5247, 49 / 176, -5103 / 18656),
)
_B = (35 / 384, 0.0, 500 / 1113, 125 / 192, -2187 / 6784, 11 / 84)
# Difference between the 5th and embedded 4th order weights (last entry weights k7)
_E = (71 / 57600, 0.0, -71 / 16695, 71 / 1920, -17253 / 339200, 22 / 525, -1 / 40)

MAX_GROWTH = 4.0
SAFETY = 0.8
REJECT_SAFETY = 0.2


class IntegrationError(RuntimeError):
    """Raised when the adaptive integrator cannot reach the end of the interval."""


def dopri_integrate(
    y0: np.ndarray,
    dt: float,
    derivative_func: DerivativeFunc,
    rtol: float = 1e-4,
    atol: float = 1e-4,
    max_steps: int = 1000,
) -> np.ndarray:
    """Advance y0 by exactly dt with an adaptive Dormand-Prince 4(5) scheme.

    Each call starts a fresh step sequence on [0, dt] with an initial internal
    step of dt / 10 and returns only the value at dt. The input array is not
    modified.

    Args:
        y0: Initial state vector
        dt: Time increment (>= 0)
        derivative_func: Right-hand side f(t, y) -> dy/dt
        rtol: Relative local error tolerance
        atol: Absolute local error tolerance
        max_steps: Maximum number of attempted internal steps

    Returns:
        State vector at t = dt

    Raises:
        ValueError: If dt is negative
        IntegrationError: If the step size underflows or max_steps is exceeded
    """
    if dt < 0:
        raise ValueError(f"dt must be non-negative, got {dt}")

    y = np.array(y0, dtype=np.float64)
    if dt == 0:
        return y

    t = 0.0
    h = dt / 10.0
    k1 = np.asarray(derivative_func(t, y), dtype=np.float64)
    attempts = 0
    accepted = 0

    while t < dt:
        if attempts >= max_steps:
            raise IntegrationError(
                f"Integrator exceeded {max_steps} steps at t={t} of {dt} (accepted {accepted})"
            )
        attempts += 1

        last = t + h >= dt
        if last:
            h = dt - t
        if t + h == t:
            raise IntegrationError(f"Step size underflow at t={t}")

        ks = [k1]
        for stage in range(1, 6):
            y_stage = y + h * sum(a * k for a, k in zip(_A[stage], ks))
            ks.append(np.asarray(derivative_func(t + _C[stage] * h, y_stage), dtype=np.float64))

        y_new = y + h * sum(b * k for b, k in zip(_B, ks))
        k7 = np.asarray(derivative_func(t + h, y_new), dtype=np.float64)

        error = h * sum(e * k for e, k in zip(_E, [*ks, k7]))
        scale = atol + rtol * np.maximum(np.abs(y), np.abs(y_new))
        err_norm = float(np.max(np.abs(error) / scale))
        if not np.isfinite(err_norm):
            raise IntegrationError(f"Non-finite error estimate at t={t} (h={h})")

        if err_norm > 1.0:
            # Reject and retry with a smaller step
            h *= REJECT_SAFETY * err_norm**-0.25
            continue

        accepted += 1
        t = dt if last else t + h
        y = y_new
        k1 = k7

        if err_norm == 0.0:
            h *= MAX_GROWTH
        else:
            h *= min(SAFETY * err_norm**-0.25, MAX_GROWTH)

    logger.debug(f"dopri_integrate: dt={dt} accepted={accepted} attempts={attempts}")
    return y
