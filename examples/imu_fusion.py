"""IMU/GPS fusion task with a stream aligner.

The IMU delivers a sample every 10 ms and the GPS one fix per second.
Both are pushed into the aligner, which replays them in timestamp order
through ``imu_callback`` and ``gps_callback`` while waiting at most
200 ms for a late sample. A raw counter listens to the IMU port too.

Generate the base class with::

    aligngen generate examples/imu_fusion.py --output imu_fusion_base.py

then subclass ``ImuFusionBase`` and override the two callbacks.
"""

from aligngen import TaskDescription

task = TaskDescription("imu_fusion")
task.input_port("imu", "ImuSample")
task.input_port("gps", "GpsFix")
task.output_port("pose", "Pose")

task.add_member("raw_imu_count", "int", "0")

with task.stream_aligner() as aligner:
    aligner.max_latency(0.2)
    aligner.align_port("imu", 0.01)
    aligner.align_port("gps", 1.0)

# Runs after the aligner push for every fresh IMU sample.
task.add_listener("imu", lambda sample: "self.raw_imu_count += 1")
