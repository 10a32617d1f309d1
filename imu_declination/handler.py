"""Per-sample pipeline: frame transform, declination, publish."""

from dataclasses import replace
from typing import Callable, Optional

from .declination import DeclinationRotation
from .sample import ImuSample
from .transform import FrameTransformResolver, TransformUnavailable, rotate_covariance


class ImuDeclinationHandler:
    """Moves each IMU sample into ``target_frame`` and applies declination.

    Samples whose transform cannot be resolved are dropped and logged; nothing
    is published for them and the next sample is handled normally.
    """

    def __init__(
        self,
        resolver: FrameTransformResolver,
        declination: DeclinationRotation,
        target_frame: str,
        publish: Callable[[ImuSample], None],
        logger,
    ) -> None:
        self.resolver = resolver
        self.declination = declination
        self.target_frame = target_frame
        self._publish = publish
        self._logger = logger
        self.published = 0
        self.dropped = 0

    def to_target_frame(self, sample: ImuSample) -> ImuSample:
        """Re-express ``sample`` in the target frame.

        Raises:
            TransformUnavailable: if any of the three lookups fails.
        """
        target, source, stamp = self.target_frame, sample.frame_id, sample.stamp
        orientation = self.resolver.transform_quaternion(target, source, stamp, sample.orientation)
        angular_velocity = self.resolver.transform_vector(
            target, source, stamp, sample.angular_velocity
        )
        linear_acceleration = self.resolver.transform_vector(
            target, source, stamp, sample.linear_acceleration
        )

        rotation = self.resolver.lookup_rotation(target, source, stamp)
        return ImuSample(
            stamp=stamp,
            frame_id=target,
            orientation=orientation,
            angular_velocity=angular_velocity,
            linear_acceleration=linear_acceleration,
            orientation_covariance=rotate_covariance(rotation, sample.orientation_covariance),
            angular_velocity_covariance=rotate_covariance(
                rotation, sample.angular_velocity_covariance
            ),
            linear_acceleration_covariance=rotate_covariance(
                rotation, sample.linear_acceleration_covariance
            ),
        )

    def handle(self, sample: ImuSample) -> Optional[ImuSample]:
        """Process one inbound sample; returns the published sample or None."""
        try:
            framed = self.to_target_frame(sample)
        except TransformUnavailable as exc:
            self.dropped += 1
            self._logger.warning(f'Dropping IMU sample ({self.dropped} dropped so far): {exc}')
            return None

        corrected = replace(framed, orientation=self.declination.apply(framed.orientation))
        self._publish(corrected)
        self.published += 1
        return corrected
