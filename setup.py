from glob import glob

from setuptools import setup

package_name = 'imu_declination'

setup(
    name=package_name,
    version='0.1.0',
    packages=[package_name],
    data_files=[
        # Allows `ros2 pkg` to find the package
        ('share/ament_index/resource_index/packages',
         ['resource/' + package_name]),
        # Install package.xml
        ('share/' + package_name, ['package.xml']),
        ('share/' + package_name + '/config', glob('config/*.yaml')),
        ('share/' + package_name + '/launch', glob('launch/*.launch.py')),
    ],
    install_requires=['setuptools', 'numpy', 'ahrs'],
    extras_require={
        'test': ['pytest'],
    },
    zip_safe=True,
    maintainer='Claudio',
    maintainer_email='claudio@example.com',
    description='ROS 2 node that transforms IMU data into a reference frame '
                'and applies a magnetic declination offset to its orientation.',
    license='MIT',
    tests_require=['pytest'],
    entry_points={
        'console_scripts': [
            # CLI entry point: `ros2 run imu_declination apply_declination_node`
            'apply_declination_node = imu_declination.apply_declination_node:main',
        ],
    },
)
