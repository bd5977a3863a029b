"""Tests for the in-process port runtime used by generated modules."""

from __future__ import annotations

import pytest

from aligngen.runtime import FlowStatus, InputPort, OutputPort


class TestInputPort:
    def test_never_written_port_has_no_data(self):
        port = InputPort("imu", "ImuSample")
        assert port.read() == (FlowStatus.NO_DATA, None)
        assert port.read(False) == (FlowStatus.NO_DATA, None)

    def test_new_then_old_data(self):
        port = InputPort("imu", "ImuSample")
        port.push("s1")

        assert port.read(False) == (FlowStatus.NEW_DATA, "s1")
        assert port.read(False) == (FlowStatus.OLD_DATA, None)
        assert port.read() == (FlowStatus.OLD_DATA, "s1")

    def test_samples_are_read_in_arrival_order(self):
        port = InputPort("imu", "ImuSample")
        for value in ("a", "b", "c"):
            port.push(value)

        assert port.pending == 3
        assert [port.read(False)[1] for _ in range(3)] == ["a", "b", "c"]
        assert port.pending == 0

    def test_capacity_drops_oldest(self):
        port = InputPort("imu", "ImuSample", capacity=2)
        for value in ("a", "b", "c"):
            port.push(value)

        assert port.read(False) == (FlowStatus.NEW_DATA, "b")
        assert port.read(False) == (FlowStatus.NEW_DATA, "c")

    def test_capacity_must_be_positive(self):
        with pytest.raises(ValueError, match="capacity"):
            InputPort("imu", "ImuSample", capacity=0)


class TestOutputPort:
    def test_write_keeps_history(self):
        port = OutputPort("status", "Status")
        assert port.last is None

        port.write({"ok": True})
        port.write({"ok": False})

        assert port.samples == [{"ok": True}, {"ok": False}]
        assert port.last == {"ok": False}
        assert "written=2" in repr(port)
