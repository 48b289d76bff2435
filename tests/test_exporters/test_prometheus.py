"""
Тесты экспорта наблюдений в формат Prometheus.
"""

import pytest

from mikrotik_exporter import __version__
from mikrotik_exporter.collectors.firmware import FirmwareCollector
from mikrotik_exporter.core.metrics import (
    MetricDescriptor,
    Observation,
    ObservationSink,
    ValueKind,
)
from mikrotik_exporter.exporters import (
    build_families,
    build_process_registry,
    render,
    render_sink,
)

from fakes import make_device


RX_BYTE = MetricDescriptor(
    subsystem="interface",
    name="rx_byte",
    help="rx-byte",
    label_names=("interface",),
    kind=ValueKind.COUNTER,
)
CPU_LOAD = MetricDescriptor(subsystem="system", name="cpu_load", help="cpu-load")
UNUSED = MetricDescriptor(subsystem="bgp", name="up", help="BGP session is established")


@pytest.fixture
def sink():
    sink = ObservationSink()
    sink.emit(Observation(RX_BYTE, 1000.0, ("ether1",)), make_device("r1", "10.0.0.1"))
    sink.emit(Observation(CPU_LOAD, 4.0), make_device("r1", "10.0.0.1"))
    sink.emit(Observation(RX_BYTE, 50.0, ("ether1",)), make_device("r2", "10.0.0.2"))
    return sink


@pytest.mark.unit
class TestBuildFamilies:
    """Тесты группировки наблюдений."""

    def test_order_and_empty_families(self, sink):
        families = build_families(sink, [CPU_LOAD, UNUSED, RX_BYTE])
        assert [f.name for f in families] == ["mikrotik_system_cpu_load", "mikrotik_interface_rx_byte"]

    def test_device_labels(self, sink):
        families = build_families(sink, [RX_BYTE], device_labels=True)
        rx = families[0]
        assert rx.type == "counter"
        labels = [s.labels for s in rx.samples if s.name.endswith("_total")]
        assert labels == [
            {"device": "r1", "device_address": "10.0.0.1", "interface": "ether1"},
            {"device": "r2", "device_address": "10.0.0.2", "interface": "ether1"},
        ]

    def test_device_labels_reserved(self, sink):
        clashing = MetricDescriptor(
            subsystem="system", name="thing", help="thing", label_names=("device",)
        )
        with pytest.raises(ValueError, match="device"):
            build_families(sink, [clashing], device_labels=True)

    def test_unknown_descriptor_appended(self, sink):
        families = build_families(sink, [CPU_LOAD])
        assert [f.name for f in families] == ["mikrotik_system_cpu_load", "mikrotik_interface_rx_byte"]


@pytest.mark.unit
class TestRender:
    """Тесты текстового формата."""

    def test_render_sink(self, sink):
        text = render_sink(sink, [RX_BYTE, CPU_LOAD]).decode("utf-8")

        assert "# HELP mikrotik_interface_rx_byte_total rx-byte" in text
        assert "# TYPE mikrotik_interface_rx_byte_total counter" in text
        assert 'mikrotik_interface_rx_byte_total{interface="ether1"} 1000.0' in text
        assert "# TYPE mikrotik_system_cpu_load gauge" in text
        assert "mikrotik_system_cpu_load 4.0" in text

    def test_render_with_device_labels(self, sink):
        text = render_sink(sink, [CPU_LOAD], device_labels=True).decode("utf-8")
        line = next(l for l in text.splitlines() if l.startswith("mikrotik_system_cpu_load{"))
        assert 'device_address="10.0.0.1"' in line
        assert 'device="r1"' in line
        assert line.endswith(" 4.0")

    def test_firmware_keeps_package_name_with_device_labels(self):
        collector = FirmwareCollector()
        sink = ObservationSink()
        sink.emit(
            Observation(collector.descriptor("package"), 1.0, ("routeros", "false", "7.12", "x")),
            make_device("r1", "10.0.0.1"),
        )

        text = render_sink(sink, collector.describe(), device_labels=True).decode("utf-8")
        line = next(l for l in text.splitlines() if l.startswith("mikrotik_system_package{"))
        for label in (
            'device="r1"',
            'device_address="10.0.0.1"',
            'name="routeros"',
            'disabled="false"',
            'version="7.12"',
            'build_time="x"',
        ):
            assert label in line
        assert line.endswith(" 1.0")

    def test_empty_sink(self):
        assert render_sink(ObservationSink(), [CPU_LOAD]) == b""

    def test_process_registry(self):
        text = render(build_process_registry()).decode("utf-8")
        assert "python_info" in text
        assert "python_gc_objects_collected_total" in text
        assert 'mikrotik_exporter_build_info{version="' + __version__ + '"} 1.0' in text
