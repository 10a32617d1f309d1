"""IMU declination ROS 2 package.

This package contains a ROS 2 node that moves incoming IMU samples into a
reference frame, rotates their orientation by a magnetic declination angle
and republishes them. The declination can be changed at runtime by
publishing a new angle on the ``declination`` topic.
"""
