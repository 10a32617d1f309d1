"""Tests for the ROS 2 node wiring. Skipped when ROS 2 is not sourced."""

import math

import numpy as np
import pytest

rclpy = pytest.importorskip('rclpy')
pytest.importorskip('tf2_ros')
pytest.importorskip('sensor_msgs.msg')

from imu_declination.apply_declination_node import (  # noqa: E402
    ApplyDeclinationNode,
    sample_to_msg,
)
from imu_declination.sample import ImuSample, Stamp  # noqa: E402


@pytest.fixture
def ros_context():
    rclpy.init()
    yield
    rclpy.shutdown()


class TestSampleToMsg:
    """Test converting samples back to sensor_msgs/Imu."""

    def test_fields_copied(self) -> None:
        """Test stamp, frame, quaternion order and covariances."""
        sample = ImuSample(
            stamp=Stamp(1712345678, 999999999),
            frame_id='base_link',
            orientation=np.array([0.9, 0.1, 0.2, 0.3]),
            angular_velocity=np.array([1.0, 2.0, 3.0]),
            linear_acceleration=np.array([4.0, 5.0, 6.0]),
            linear_acceleration_covariance=np.diag([0.1, 0.2, 0.3]),
        )
        msg = sample_to_msg(sample)

        assert msg.header.stamp.sec == 1712345678
        assert msg.header.stamp.nanosec == 999999999
        assert msg.header.frame_id == 'base_link'
        assert (msg.orientation.w, msg.orientation.x) == pytest.approx((0.9, 0.1))
        assert msg.angular_velocity.z == 3.0
        assert msg.linear_acceleration.x == 4.0
        assert msg.linear_acceleration_covariance[4] == pytest.approx(0.2)

        assert np.allclose(ImuSample.from_msg(msg).orientation, sample.orientation)


class TestApplyDeclinationNode:
    """Test node parameters and declination wiring."""

    def test_default_parameters(self, ros_context) -> None:
        """Test the node starts with base_link and zero declination."""
        node = ApplyDeclinationNode()
        try:
            assert node.get_name() == 'apply_declination_to_imu'
            assert node.tf_link == 'base_link'
            assert node.declination.angle == 0.0
            assert node.handler.target_frame == 'base_link'
        finally:
            node.destroy_node()

    def test_declination_update_callback(self, ros_context) -> None:
        """Test a Float32 message on the callback replaces the declination."""
        from std_msgs.msg import Float32

        node = ApplyDeclinationNode()
        try:
            node.declination.update(Float32(data=math.pi / 2))
            assert node.declination.angle == pytest.approx(math.pi / 2, abs=1e-6)
        finally:
            node.destroy_node()

    def test_imu_callback_publishes_in_target_frame(self, ros_context, monkeypatch) -> None:
        """Test an Imu message is transformed through tf2 and republished."""
        from geometry_msgs.msg import TransformStamped
        from sensor_msgs.msg import Imu

        node = ApplyDeclinationNode()
        try:
            t = TransformStamped()
            t.header.frame_id = 'base_link'
            t.child_frame_id = 'imu_link'
            t.transform.rotation.z = math.sin(math.pi / 4)
            t.transform.rotation.w = math.cos(math.pi / 4)
            node.resolver.buffer.set_transform_static(t, 'test')

            sent = []
            monkeypatch.setattr(node.publisher, 'publish', sent.append)

            msg = Imu()
            msg.header.stamp.sec = 42
            msg.header.stamp.nanosec = 7
            msg.header.frame_id = 'imu_link'
            msg.orientation.w = 1.0
            msg.linear_acceleration.x = 1.0
            node.imu_callback(msg)

            msg.header.frame_id = 'camera_link'
            node.imu_callback(msg)

            assert len(sent) == 1
            out = sent[0]
            assert out.header.frame_id == 'base_link'
            assert (out.header.stamp.sec, out.header.stamp.nanosec) == (42, 7)
            assert out.orientation.z == pytest.approx(math.sin(math.pi / 4))
            assert out.linear_acceleration.y == pytest.approx(1.0)
            assert (node.handler.published, node.handler.dropped) == (1, 1)
        finally:
            node.destroy_node()
