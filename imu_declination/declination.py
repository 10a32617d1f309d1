"""Holder for the current magnetic declination rotation."""

import math
import threading

import numpy as np
import numpy.typing as npt

from .transform import rotate_quaternion


def yaw_quaternion(angle: float) -> npt.NDArray[np.float64]:
    """Quaternion [w, x, y, z] for a rotation of ``angle`` radians about Z."""
    half = 0.5 * angle
    return np.array([math.cos(half), 0.0, 0.0, math.sin(half)])


class DeclinationRotation:
    """Owns the declination angle and applies it to orientations.

    ``set`` swaps in a new immutable rotation under a lock, so ``apply`` always
    sees either the previous or the new value, never a mix.
    """

    def __init__(self, angle: float = 0.0, logger=None) -> None:
        self._logger = logger
        self._lock = threading.Lock()
        self._angle = 0.0
        self._quaternion = self._freeze(yaw_quaternion(0.0))
        self.set(angle)

    @staticmethod
    def _freeze(q: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        q.flags.writeable = False
        return q

    @property
    def angle(self) -> float:
        with self._lock:
            return self._angle

    @property
    def quaternion(self) -> npt.NDArray[np.float64]:
        with self._lock:
            return self._quaternion

    def set(self, angle: float) -> bool:
        """Replace the rotation with a pure yaw of ``angle`` radians.

        The previous value is discarded, not composed with. Non-finite angles
        are ignored and ``False`` is returned.
        """
        angle = float(angle)
        if not math.isfinite(angle):
            if self._logger is not None:
                self._logger.warning(f'Ignoring non-finite declination {angle!r}')
            return False

        q = self._freeze(yaw_quaternion(angle))
        with self._lock:
            self._angle = angle
            self._quaternion = q
        return True

    def apply(self, orientation: npt.ArrayLike) -> npt.NDArray[np.float64]:
        """Return ``declination * orientation``."""
        return rotate_quaternion(self.quaternion, orientation)

    def update(self, msg) -> None:
        """Callback for std_msgs/Float32 declination updates."""
        angle = float(msg.data)
        if self.set(angle) and self._logger is not None:
            self._logger.info(
                f'Declination set to {angle:.6f} rad ({math.degrees(angle):.3f} deg)'
            )
