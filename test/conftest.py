"""Pytest configuration and fixtures."""

import math

import numpy as np
import pytest

from imu_declination.declination import yaw_quaternion
from imu_declination.sample import ImuSample, Stamp
from imu_declination.transform import FrameTransformResolver, TransformUnavailable

IDENTITY = np.array([1.0, 0.0, 0.0, 0.0])


class StaticResolver(FrameTransformResolver):
    """Resolver backed by a fixed table of (target, source) -> rotation."""

    def __init__(self, rotations=None) -> None:
        self.rotations = dict(rotations or {})

    def lookup_rotation(self, target_frame, source_frame, stamp):
        if target_frame == source_frame:
            return IDENTITY.copy()
        try:
            return self.rotations[(target_frame, source_frame)]
        except KeyError:
            raise TransformUnavailable(target_frame, source_frame, 'frame does not exist')


class RecordingLogger:
    """Collects log calls the way the node logger would receive them."""

    def __init__(self) -> None:
        self.records = []

    def debug(self, message) -> None:
        self.records.append(('debug', message))

    def info(self, message) -> None:
        self.records.append(('info', message))

    def warning(self, message) -> None:
        self.records.append(('warning', message))

    def messages(self, level):
        return [message for lvl, message in self.records if lvl == level]


def make_sample(
    frame_id='imu_link',
    orientation=(1.0, 0.0, 0.0, 0.0),
    angular_velocity=(0.0, 0.0, 0.0),
    linear_acceleration=(0.0, 0.0, 9.81),
    stamp=Stamp(1700000000, 123456789),
    **covariances,
) -> ImuSample:
    return ImuSample(
        stamp=stamp,
        frame_id=frame_id,
        orientation=np.array(orientation, dtype=float),
        angular_velocity=np.array(angular_velocity, dtype=float),
        linear_acceleration=np.array(linear_acceleration, dtype=float),
        **covariances,
    )


@pytest.fixture
def logger():
    return RecordingLogger()


@pytest.fixture
def resolver():
    """imu_link is mounted yawed 90 degrees relative to base_link."""
    return StaticResolver({('base_link', 'imu_link'): yaw_quaternion(math.pi / 2)})


@pytest.fixture
def sample_factory():
    return make_sample
