"""tf2 binding for :class:`FrameTransformResolver`."""

import numpy as np
import numpy.typing as npt
from rclpy.duration import Duration
from rclpy.time import Time
from tf2_ros import Buffer, TransformException, TransformListener

from .sample import Stamp
from .transform import FrameTransformResolver, TransformUnavailable


class Tf2Resolver(FrameTransformResolver):
    """Resolves frame rotations from the tf2 buffer filled by a listener."""

    def __init__(self, node, timeout: float = 0.0) -> None:
        self.buffer = Buffer()
        self.listener = TransformListener(self.buffer, node)
        self.timeout = Duration(seconds=timeout)

    def lookup_rotation(
        self, target_frame: str, source_frame: str, stamp: Stamp
    ) -> npt.NDArray[np.float64]:
        time = Time(seconds=stamp.sec, nanoseconds=stamp.nanosec)
        try:
            transform = self.buffer.lookup_transform(
                target_frame, source_frame, time, timeout=self.timeout
            )
        except TransformException as exc:
            # LookupException, ConnectivityException, ExtrapolationException and timeouts
            raise TransformUnavailable(target_frame, source_frame, str(exc)) from exc

        rot = transform.transform.rotation
        return np.array([rot.w, rot.x, rot.y, rot.z])
