"""IMU sample representation used by the declination pipeline."""

from dataclasses import dataclass, field
from typing import NamedTuple

import numpy as np
import numpy.typing as npt

# sensor_msgs/Imu marks an unknown covariance with -1 in the first element.
COVARIANCE_UNKNOWN = -1.0


class Stamp(NamedTuple):
    """Exact copy of a builtin_interfaces/Time stamp."""

    sec: int
    nanosec: int

    @classmethod
    def from_msg(cls, stamp) -> 'Stamp':
        return cls(int(stamp.sec), int(stamp.nanosec))


def _zero_covariance() -> npt.NDArray[np.float64]:
    return np.zeros((3, 3))


@dataclass(frozen=True, eq=False)
class ImuSample:
    """A single IMU reading expressed in ``frame_id``.

    Orientation is stored as ``[w, x, y, z]``. Samples are never modified in
    place; every processing step builds a new instance.
    """

    stamp: Stamp
    frame_id: str
    orientation: npt.NDArray[np.float64]
    angular_velocity: npt.NDArray[np.float64]  # rad/s
    linear_acceleration: npt.NDArray[np.float64]  # m/s^2
    orientation_covariance: npt.NDArray[np.float64] = field(default_factory=_zero_covariance)
    angular_velocity_covariance: npt.NDArray[np.float64] = field(
        default_factory=_zero_covariance
    )
    linear_acceleration_covariance: npt.NDArray[np.float64] = field(
        default_factory=_zero_covariance
    )

    def __post_init__(self) -> None:
        """Validate shapes and freeze the arrays."""
        if np.shape(self.orientation) != (4,):
            raise ValueError('Orientation must be a quaternion [w, x, y, z]')
        if np.shape(self.angular_velocity) != (3,):
            raise ValueError('Angular velocity must be a 3D vector')
        if np.shape(self.linear_acceleration) != (3,):
            raise ValueError('Linear acceleration must be a 3D vector')
        for name in (
            'orientation_covariance',
            'angular_velocity_covariance',
            'linear_acceleration_covariance',
        ):
            if np.shape(getattr(self, name)) != (3, 3):
                raise ValueError(f'{name} must be 3x3')

        for name in (
            'orientation',
            'angular_velocity',
            'linear_acceleration',
            'orientation_covariance',
            'angular_velocity_covariance',
            'linear_acceleration_covariance',
        ):
            array = np.array(getattr(self, name), dtype=np.float64)
            array.flags.writeable = False
            object.__setattr__(self, name, array)

    @classmethod
    def from_msg(cls, msg) -> 'ImuSample':
        """Build a sample from a sensor_msgs/Imu message.

        Only attribute access is used, so anything shaped like an Imu message
        is accepted.
        """
        ori = msg.orientation
        ang = msg.angular_velocity
        lin = msg.linear_acceleration
        return cls(
            stamp=Stamp.from_msg(msg.header.stamp),
            frame_id=msg.header.frame_id,
            orientation=np.array([ori.w, ori.x, ori.y, ori.z]),
            angular_velocity=np.array([ang.x, ang.y, ang.z]),
            linear_acceleration=np.array([lin.x, lin.y, lin.z]),
            orientation_covariance=np.reshape(msg.orientation_covariance, (3, 3)),
            angular_velocity_covariance=np.reshape(msg.angular_velocity_covariance, (3, 3)),
            linear_acceleration_covariance=np.reshape(
                msg.linear_acceleration_covariance, (3, 3)
            ),
        )
