"""Moves a mocap frame along a cubic B-spline on SE(3)."""

import mujoco
import mujoco.viewer
import numpy as np
from loop_rate_limiters import RateLimiter

import liespline

_XML = """
<mujoco>
  <worldbody>
    <light pos="0 0 3"/>
    <geom type="plane" size="2 2 0.1" rgba=".9 .9 .9 1"/>
    <body name="target" mocap="true" pos="0 0 0.5">
      <geom type="box" size=".1 .05 .02" rgba=".2 .6 .9 1" contype="0" conaffinity="0"/>
    </body>
  </worldbody>
</mujoco>
"""

if __name__ == "__main__":
    model = mujoco.MjModel.from_xml_string(_XML)
    data = mujoco.MjData(model)

    # Waypoints on a wavy circle, each with a random orientation.
    np.random.seed(0)
    waypoints = []
    for angle in np.linspace(0.0, 2.0 * np.pi, 9):
        translation = np.array(
            [np.cos(angle), np.sin(angle), 0.5 + 0.2 * np.sin(2.0 * angle)]
        )
        rotation = liespline.SO3.exp(0.5 * np.random.randn(3))
        waypoints.append(
            liespline.SE3.from_rotation_and_translation(
                rotation=rotation, translation=translation
            )
        )

    # Offsetting t0 by dt * K / 2 puts each waypoint at the peak of its basis.
    degree = 3
    dt = 1.0
    spline = liespline.BSpline(
        liespline.SE3, degree, t0=0.5 * dt * degree, dt=dt, ctrl_points=waypoints
    )

    viewer = mujoco.viewer.launch_passive(
        model=model, data=data, show_left_ui=False, show_right_ui=False
    )
    mujoco.mjv_defaultFreeCamera(model, viewer.cam)
    rate_limiter = RateLimiter(frequency=60.0, warn=False)

    t = spline.t_min()
    while viewer.is_running():
        pose = spline.eval(t).value
        data.mocap_pos[0] = pose.translation()
        data.mocap_quat[0] = pose.rotation().wxyz
        mujoco.mj_forward(model, data)

        viewer.sync()
        rate_limiter.sleep()

        t += rate_limiter.dt
        if t > spline.t_max():
            t = spline.t_min()
