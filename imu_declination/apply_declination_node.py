#!/usr/bin/env python3
"""ROS 2 node that applies a magnetic declination offset to IMU data.

- Subscribes to: data (sensor_msgs/Imu), declination (std_msgs/Float32)
- Publishes: data_decl (sensor_msgs/Imu)

Each IMU message is moved into the ``tf_link`` frame using tf2, its
orientation is rotated about Z by the current declination, and the result
is republished. Samples that cannot be transformed are dropped.
"""

import math

import rclpy
from rclpy.callback_groups import MutuallyExclusiveCallbackGroup
from rclpy.executors import MultiThreadedExecutor
from rclpy.node import Node
from sensor_msgs.msg import Imu
from std_msgs.msg import Float32

from .declination import DeclinationRotation
from .handler import ImuDeclinationHandler
from .sample import ImuSample
from .tf_resolver import Tf2Resolver

QUEUE_DEPTH = 5


def sample_to_msg(sample: ImuSample) -> Imu:
    """Convert an ImuSample back into a sensor_msgs/Imu message."""
    msg = Imu()
    msg.header.stamp.sec = sample.stamp.sec
    msg.header.stamp.nanosec = sample.stamp.nanosec
    msg.header.frame_id = sample.frame_id

    # [w, x, y, z] -> ROS x, y, z, w
    w, x, y, z = (float(v) for v in sample.orientation)
    msg.orientation.x = x
    msg.orientation.y = y
    msg.orientation.z = z
    msg.orientation.w = w

    msg.angular_velocity.x, msg.angular_velocity.y, msg.angular_velocity.z = (
        float(v) for v in sample.angular_velocity
    )
    msg.linear_acceleration.x, msg.linear_acceleration.y, msg.linear_acceleration.z = (
        float(v) for v in sample.linear_acceleration
    )

    msg.orientation_covariance = [float(v) for v in sample.orientation_covariance.flat]
    msg.angular_velocity_covariance = [
        float(v) for v in sample.angular_velocity_covariance.flat
    ]
    msg.linear_acceleration_covariance = [
        float(v) for v in sample.linear_acceleration_covariance.flat
    ]
    return msg


class ApplyDeclinationNode(Node):
    """ROS 2 node wiring the declination pipeline to topics and tf2."""

    def __init__(self) -> None:
        super().__init__('apply_declination_to_imu')

        # Parameters:
        # - tf_link: frame every IMU sample is transformed into
        # - default: declination (rad) used until one arrives on 'declination'
        # - transform_timeout: max seconds to wait for a transform
        self.declare_parameter('tf_link', 'base_link')
        self.declare_parameter('default', 0.0)
        self.declare_parameter('transform_timeout', 0.0)

        self.tf_link = self.get_parameter('tf_link').get_parameter_value().string_value
        default = self.get_parameter('default').get_parameter_value().double_value
        timeout = self.get_parameter('transform_timeout').get_parameter_value().double_value

        self.declination = DeclinationRotation(default, logger=self.get_logger())
        self.resolver = Tf2Resolver(self, timeout=timeout)

        self.publisher = self.create_publisher(Imu, 'data_decl', QUEUE_DEPTH)
        self.handler = ImuDeclinationHandler(
            self.resolver,
            self.declination,
            self.tf_link,
            lambda sample: self.publisher.publish(sample_to_msg(sample)),
            self.get_logger(),
        )

        # Both subscriptions share one exclusive group so samples and updates
        # are handled one at a time, in order, while /tf keeps flowing on the
        # other executor threads.
        self._callback_group = MutuallyExclusiveCallbackGroup()
        self.declination_subscription = self.create_subscription(
            Float32,
            'declination',
            self.declination.update,
            QUEUE_DEPTH,
            callback_group=self._callback_group,
        )
        self.imu_subscription = self.create_subscription(
            Imu,
            'data',
            self.imu_callback,
            QUEUE_DEPTH,
            callback_group=self._callback_group,
        )

        self.get_logger().info(
            f'IMU declination node initialized.\n'
            f'  IMU topic         : data -> data_decl\n'
            f'  Declination topic : declination\n'
            f'  Target frame      : {self.tf_link}\n'
            f'  Default decl.     : {default:.6f} rad ({math.degrees(default):.3f} deg)'
        )

    # ------------------------------------------------------------------
    # ROS 2 callback: called every time a new Imu message is received
    # ------------------------------------------------------------------
    def imu_callback(self, msg: Imu) -> None:
        """Transform, apply declination and republish one IMU message."""
        self.handler.handle(ImuSample.from_msg(msg))

    def destroy_node(self):  # type: ignore[override]
        """Log the publish and drop totals before shutting down."""
        self.get_logger().info(
            f'Shutting down: {self.handler.published} IMU samples published, '
            f'{self.handler.dropped} dropped.'
        )
        return super().destroy_node()


def main(args=None) -> None:
    """Entry point for the ROS 2 node."""
    rclpy.init(args=args)
    node = None
    try:
        node = ApplyDeclinationNode()
        rclpy.spin(node, executor=MultiThreadedExecutor())
    except KeyboardInterrupt:
        pass
    finally:
        if node is not None:
            node.destroy_node()
        if rclpy.ok():
            rclpy.shutdown()


if __name__ == '__main__':
    main()
