import os

from ament_index_python.packages import get_package_share_directory
from launch import LaunchDescription
from launch.actions import DeclareLaunchArgument
from launch.substitutions import LaunchConfiguration
from launch_ros.actions import Node


def generate_launch_description():
    pkg = get_package_share_directory('imu_declination')
    cfg = os.path.join(pkg, 'config', 'apply_declination.yaml')

    namespace = LaunchConfiguration('namespace')

    apply_declination_node = Node(
        package='imu_declination',
        executable='apply_declination_node',
        name='apply_declination_to_imu',
        namespace=namespace,
        output='screen',
        parameters=[cfg],
        emulate_tty=True,
    )

    return LaunchDescription([
        DeclareLaunchArgument('namespace', default_value='imu',
                              description='Namespace of the data/declination topics'),
        apply_declination_node,
    ])
