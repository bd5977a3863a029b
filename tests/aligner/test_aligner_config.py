"""Tests for the stream_aligner() declaration block."""

from __future__ import annotations

import pytest

from aligngen import (
    AlignedPortSpec,
    ConfigurationError,
    MissingConfigurationError,
    TaskDescription,
    buffer_capacity,
)


class TestStreamAlignerBlock:
    def test_block_collects_ports_in_declaration_order(self):
        task = TaskDescription("task")
        with task.stream_aligner() as aligner:
            aligner.max_latency(0.2)
            aligner.align_port("imu", 0.01)
            aligner.align_port("gps", 1, priority=3)

        assert aligner.latency == 0.2
        assert aligner.aligned_ports == [
            AlignedPortSpec("imu", 0.01),
            AlignedPortSpec("gps", 1.0, priority=3),
        ]

    def test_options_chain(self):
        task = TaskDescription("task")
        with task.stream_aligner() as aligner:
            aligner.max_latency(0.5).align_port("laser", 0.025).align_port("odometry", 0.01)

        assert [spec.port_name for spec in aligner.aligned_ports] == ["laser", "odometry"]

    def test_missing_max_latency_aborts_and_declares_nothing(self):
        task = TaskDescription("task")
        with pytest.raises(MissingConfigurationError, match="no max_latency specified") as excinfo:
            with task.stream_aligner() as aligner:
                aligner.align_port("imu", 0.01)

        assert excinfo.value.option == "max_latency"
        assert task.find_property("aggregator_max_latency") is None
        assert task.find_property("imu_period") is None
        assert task.find_port("aggregator_status") is None
        assert task.stream_aligner_generator is None
        assert task.listener_registry.port_names == ()

    def test_error_inside_block_declares_nothing(self):
        task = TaskDescription("task")
        with pytest.raises(KeyError):
            with task.stream_aligner() as aligner:
                aligner.max_latency(0.1)
                raise KeyError("boom")

        assert task.find_property("aggregator_max_latency") is None
        assert task.stream_aligner_generator is None

    def test_only_one_stream_aligner_per_task(self):
        task = TaskDescription("task")
        with task.stream_aligner() as aligner:
            aligner.max_latency(0.1)

        with pytest.raises(ConfigurationError, match="already declares a stream aligner"):
            task.stream_aligner()

    def test_block_registers_listener_generator(self):
        task = TaskDescription("task")
        assert task.listener_registry is None

        with task.stream_aligner() as aligner:
            aligner.max_latency(0.1)

        assert task.listener_registry is not None

    @pytest.mark.parametrize("latency", [0, -0.5, float("nan"), float("inf")])
    def test_latency_must_be_positive_and_finite(self, latency):
        task = TaskDescription("task")
        with task.stream_aligner() as aligner:
            with pytest.raises(ConfigurationError, match="max_latency"):
                aligner.max_latency(latency)
            aligner.max_latency(0.1)

    def test_period_type_checked(self):
        task = TaskDescription("task")
        with task.stream_aligner() as aligner:
            aligner.max_latency(0.1)
            with pytest.raises(TypeError, match="imu period"):
                aligner.align_port("imu", "10ms")
            with pytest.raises(TypeError, match="priority"):
                aligner.align_port("imu", 0.01, priority=True)
            with pytest.raises(ConfigurationError, match="Invalid aligned port name"):
                aligner.align_port("imu data", 0.01)


class TestBufferCapacity:
    @pytest.mark.parametrize(
        ("latency", "period", "expected"),
        [
            (0.5, 0.1, 10),
            (0.2, 0.01, 40),
            (0.2, 1.0, 2),
            (1.0, 0.3, 8),
        ],
    )
    def test_twice_the_slots_covering_the_latency_window(self, latency, period, expected):
        assert buffer_capacity(latency, period) == expected

    def test_factor_is_configurable(self):
        assert buffer_capacity(0.5, 0.1, factor=3.0) == 15
