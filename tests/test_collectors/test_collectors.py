"""
Тесты коллекторов: ответ устройства -> наблюдения.
"""

import pytest
from librouteros.exceptions import TrapError

from mikrotik_exporter.collectors import (
    BGPCollector,
    CapsmanCollector,
    ConntrackCollector,
    DHCPCollector,
    DHCPLeaseCollector,
    DHCPv6Collector,
    EthernetMonitorCollector,
    FirmwareCollector,
    HealthCollector,
    InterfaceCollector,
    IPsecCollector,
    LTECollector,
    NetwatchCollector,
    OpticsCollector,
    PoolCollector,
    ResourceCollector,
    RoutesCollector,
    WlanIFCollector,
    WlanSTACollector,
)
from mikrotik_exporter.core.exceptions import QueryError
from mikrotik_exporter.core.metrics import ValueKind

from fakes import reply, samples


def by_name(sink):
    """fq_name -> список (лейблы, значение)."""
    result = {}
    for name, labels, value in samples(sink):
        result.setdefault(name, []).append((labels, value))
    return result


@pytest.mark.unit
class TestInterfaceCollector:
    """Тесты /interface/print."""

    ROW = {
        "name": "ether1",
        "type": "ether",
        "disabled": "false",
        "comment": "uplink",
        "running": "true",
        "slave": "false",
        "actual-mtu": "1500",
        "rx-byte": "1000",
        "tx-byte": "2000",
        "link-downs": "3",
    }

    def test_collect(self, make_context):
        ctx, client = make_context({"/interface/print": reply(self.ROW)})
        InterfaceCollector().collect(ctx)

        metrics = by_name(ctx.sink)
        labels = ("ether1", "ether", "false", "uplink", "true", "false")
        assert metrics["mikrotik_interface_actual_mtu"] == [(labels, 1500.0)]
        assert metrics["mikrotik_interface_running"] == [(labels, 1.0)]
        assert metrics["mikrotik_interface_rx_byte"] == [(labels, 1000.0)]
        assert metrics["mikrotik_interface_link_downs"] == [(labels, 3.0)]
        # свойства без значения не дают наблюдений
        assert "mikrotik_interface_rx_error" not in metrics

        command, *words = client.calls[0]
        assert command == "/interface/print"
        assert words[0].startswith("=.proplist=name,type,disabled,comment,running,slave,actual-mtu")

    def test_kinds(self):
        collector = InterfaceCollector()
        assert collector.descriptor("actual-mtu").kind == ValueKind.GAUGE
        assert collector.descriptor("running").kind == ValueKind.GAUGE
        assert collector.descriptor("rx-byte").kind == ValueKind.COUNTER

    def test_query_error_propagates(self, make_context):
        ctx, _ = make_context({"/interface/print": TrapError("no such command")})
        with pytest.raises(QueryError):
            InterfaceCollector().collect(ctx)


@pytest.mark.unit
class TestResourceCollector:
    """Тесты /system/resource/print."""

    def test_collect(self, make_context):
        ctx, _ = make_context({"/system/resource/print": reply({
            "board-name": "RB4011",
            "version": "7.12 (stable)",
            "free-memory": "800000000",
            "total-memory": "1073741824",
            "cpu-load": "4",
            "uptime": "3d3h42m53s",
        })})
        ResourceCollector().collect(ctx)

        metrics = by_name(ctx.sink)
        labels = ("RB4011", "7.12 (stable)")
        assert metrics["mikrotik_system_uptime"] == [(labels, 272573.0)]
        assert metrics["mikrotik_system_cpu_load"] == [(labels, 4.0)]
        assert "mikrotik_system_free_hdd_space" not in metrics

    def test_uptime_is_counter(self):
        assert ResourceCollector().descriptor("uptime").kind == ValueKind.COUNTER


@pytest.mark.unit
class TestBGPCollector:
    """Тесты BGP пиров."""

    def test_collect(self, make_context):
        ctx, _ = make_context({"/routing/bgp/peer/print": reply(
            {"name": "isp1", "remote-as": "65001", "state": "established", "prefix-count": "900000"},
            {"name": "isp2", "remote-as": "65002", "state": "idle", "prefix-count": ""},
            {"name": "isp3", "remote-as": "65003", "state": ""},
        )})
        BGPCollector().collect(ctx)

        metrics = by_name(ctx.sink)
        assert metrics["mikrotik_bgp_up"] == [
            (("isp1", "65001"), 1.0),
            (("isp2", "65002"), 0.0),
            (("isp3", "65003"), 0.0),
        ]
        assert metrics["mikrotik_bgp_prefix_count"] == [(("isp1", "65001"), 900000.0)]


@pytest.mark.unit
class TestConntrackCollector:
    def test_collect(self, make_context):
        ctx, _ = make_context({"/ip/firewall/connection/tracking/print": reply(
            {"total-entries": "1234", "max-entries": "1048576"},
        )})
        ConntrackCollector().collect(ctx)
        assert samples(ctx.sink) == [
            ("mikrotik_conntrack_entries", (), 1234.0),
            ("mikrotik_conntrack_max_entries", (), 1048576.0),
        ]


@pytest.mark.unit
class TestDHCPCollectors:
    """Тесты DHCP аренд и DHCPv6 привязок."""

    def test_active_leases(self, make_context):
        ctx, client = make_context({
            "/ip/dhcp-server/print": reply({"name": "lan"}, {"name": "guest"}),
            ("/ip/dhcp-server/lease/print", "?server=lan", "=active=", "=count-only="): reply(ret="17"),
            ("/ip/dhcp-server/lease/print", "?server=guest", "=active=", "=count-only="): reply(ret="3"),
        })
        DHCPCollector().collect(ctx)

        assert samples(ctx.sink) == [
            ("mikrotik_dhcp_leases_active_count", ("lan",), 17.0),
            ("mikrotik_dhcp_leases_active_count", ("guest",), 3.0),
        ]
        assert client.calls[0] == ("/ip/dhcp-server/print", "=.proplist=name")

    def test_lease_details(self, make_context):
        ctx, _ = make_context({"/ip/dhcp-server/lease/print": reply({
            "active-mac-address": "AA:BB:CC:DD:EE:FF",
            "server": "lan",
            "status": "bound",
            "expires-after": "9m58s",
            "active-address": "192.168.88.10",
            "host-name": "laptopé",
        })})
        DHCPLeaseCollector().collect(ctx)

        assert samples(ctx.sink) == [(
            "mikrotik_dhcp_leases_metrics",
            ("AA:BB:CC:DD:EE:FF", "lan", "bound", "598", "192.168.88.10", '"laptop\\u00e9"'),
            1.0,
        )]

    def test_lease_bad_expiry_skipped(self, make_context):
        ctx, _ = make_context({"/ip/dhcp-server/lease/print": reply(
            {"server": "lan", "expires-after": "59"},
        )})
        DHCPLeaseCollector().collect(ctx)
        assert len(ctx.sink) == 0

    def test_dhcpv6_bindings(self, make_context):
        ctx, _ = make_context({
            "/ipv6/dhcp-server/print": reply({"name": "v6"}),
            ("/ipv6/dhcp-server/binding/print", "?server=v6", "=count-only="): reply(ret="5"),
        })
        DHCPv6Collector().collect(ctx)
        assert samples(ctx.sink) == [("mikrotik_dhcpv6_binding_count", ("v6",), 5.0)]


@pytest.mark.unit
class TestFirmwareCollector:
    def test_collect(self, make_context):
        ctx, _ = make_context({"/system/package/getall": reply(
            {"name": "routeros", "disabled": "false", "version": "7.12", "build-time": "Nov/02/2023 09:00:00"},
            {"name": "wireless", "disabled": "true", "version": "7.12", "build-time": "Nov/02/2023 09:00:00"},
        )})
        FirmwareCollector().collect(ctx)
        assert samples(ctx.sink) == [
            ("mikrotik_system_package", ("routeros", "false", "7.12", "Nov/02/2023 09:00:00"), 1.0),
            ("mikrotik_system_package", ("wireless", "true", "7.12", "Nov/02/2023 09:00:00"), 0.0),
        ]


@pytest.mark.unit
class TestHealthCollector:
    """Тесты форматов RouterOS 6 и 7."""

    def test_legacy_columns(self, make_context):
        ctx, _ = make_context({"/system/health/print": reply(
            {"voltage": "24.1", "temperature": "38"},
        )})
        HealthCollector().collect(ctx)
        assert samples(ctx.sink) == [
            ("mikrotik_health_voltage", (), 24.1),
            ("mikrotik_health_temperature", (), 38.0),
        ]

    def test_v7_rows(self, make_context):
        ctx, _ = make_context({"/system/health/print": reply(
            {"name": "voltage", "value": "24.1", "type": "V"},
            {"name": "cpu-temperature", "value": "52", "type": "C"},
            {"name": "fan1-speed", "value": "4000", "type": "RPM"},
        )})
        HealthCollector().collect(ctx)
        assert samples(ctx.sink) == [
            ("mikrotik_health_voltage", (), 24.1),
            ("mikrotik_health_cpu_temperature", (), 52.0),
        ]


@pytest.mark.unit
class TestRoutesCollector:
    def test_collect(self, make_context):
        def count(*words):
            if "?bgp" in words:
                return reply(ret="900000")
            if len(words) == 2:
                return reply(ret="900010")
            return reply(ret="0")

        ctx, client = make_context({
            "/ip/route/print": count,
            "/ipv6/route/print": reply(ret="12"),
        })
        RoutesCollector().collect(ctx)

        metrics = by_name(ctx.sink)
        assert metrics["mikrotik_routes_total_count"] == [(("4",), 900010.0), (("6",), 12.0)]
        assert (("4", "bgp"), 900000.0) in metrics["mikrotik_routes_protocol_count"]
        assert (("4", "static"), 0.0) in metrics["mikrotik_routes_protocol_count"]
        assert len(metrics["mikrotik_routes_protocol_count"]) == 12
        assert ("/ip/route/print", "?disabled=false", "?bgp", "=count-only=") in client.calls


@pytest.mark.unit
class TestPoolCollector:
    def test_collect(self, make_context):
        ctx, _ = make_context({
            "/ip/pool/print": reply({"name": "dhcp_pool"}),
            ("/ip/pool/used/print", "?pool=dhcp_pool", "=count-only="): reply(ret="42"),
            "/ipv6/pool/print": reply(),
        })
        PoolCollector().collect(ctx)
        assert samples(ctx.sink) == [("mikrotik_ip_pool_pool_used_count", ("4", "dhcp_pool"), 42.0)]


@pytest.mark.unit
class TestMonitorCollectors:
    """Тесты двухстадийных коллекторов (список + monitor)."""

    def test_ethernet_monitor_batch(self, make_context):
        ctx, client = make_context({
            "/interface/ethernet/print": reply({"name": "ether1"}, {"name": "ether2"}),
            "/interface/ethernet/monitor": reply(
                {"name": "ether1", "status": "link-ok", "rate": "1Gbps", "full-duplex": "true"},
                {"name": "ether2", "status": "no-link", "rate": "", "full-duplex": "false"},
            ),
        })
        EthernetMonitorCollector().collect(ctx)

        assert client.calls[1] == (
            "/interface/ethernet/monitor",
            "=numbers=ether1,ether2",
            "=once=",
            "=.proplist=name,status,rate,full-duplex",
        )
        metrics = by_name(ctx.sink)
        assert metrics["mikrotik_monitor_status"] == [(("ether1",), 1.0), (("ether2",), 0.0)]
        assert metrics["mikrotik_monitor_rate"] == [(("ether1",), 1000.0)]
        assert metrics["mikrotik_monitor_full_duplex"] == [(("ether1",), 1.0), (("ether2",), 0.0)]

    def test_no_names_no_monitor(self, make_context):
        ctx, client = make_context({"/interface/ethernet/print": reply()})
        EthernetMonitorCollector().collect(ctx)
        assert client.commands() == ["/interface/ethernet/print"]

    def test_optics_only_sfp(self, make_context):
        ctx, client = make_context({
            "/interface/ethernet/print": reply({"name": "ether1"}, {"name": "sfp-sfpplus1"}),
            "/interface/ethernet/monitor": reply({
                "name": "sfp-sfpplus1",
                "sfp-rx-loss": "false",
                "sfp-tx-fault": "true",
                "sfp-temperature": "41",
                "sfp-rx-power": "-5.2",
            }),
        })
        OpticsCollector().collect(ctx)

        assert client.calls[1][1] == "=numbers=sfp-sfpplus1"
        metrics = by_name(ctx.sink)
        assert metrics["mikrotik_optics_rx_status"] == [(("sfp-sfpplus1",), 1.0)]
        assert metrics["mikrotik_optics_tx_status"] == [(("sfp-sfpplus1",), 0.0)]
        assert metrics["mikrotik_optics_temperature_celsius"] == [(("sfp-sfpplus1",), 41.0)]
        assert metrics["mikrotik_optics_rx_power_dbm"] == [(("sfp-sfpplus1",), -5.2)]

    def test_lte_per_interface(self, make_context):
        ctx, client = make_context({
            "/interface/lte/print": reply({"name": "lte1"}),
            "/interface/lte/info": reply({
                "current-cellid": "12345",
                "primary-band": "B3 band: 1800Mhz",
                "ca-band": "",
                "rssi": "-70",
                "sinr": "12",
            }),
        })
        LTECollector().collect(ctx)

        assert client.calls[0] == ("/interface/lte/print", "?disabled=false", "=.proplist=name")
        assert client.calls[1][:3] == ("/interface/lte/info", "=number=lte1", "=once=")
        metrics = by_name(ctx.sink)
        labels = ("lte1", "12345", "B3", "")
        assert metrics["mikrotik_lte_interface_rssi"] == [(labels, -70.0)]
        assert metrics["mikrotik_lte_interface_sinr"] == [(labels, 12.0)]

    def test_wlanif_channel_label(self, make_context):
        ctx, _ = make_context({
            "/interface/wireless/print": reply({"name": "wlan1"}),
            "/interface/wireless/monitor": reply({
                "channel": "5180/20-Ceee/ac",
                "registered-clients": "7",
                "noise-floor": "-105",
            }),
        })
        WlanIFCollector().collect(ctx)
        metrics = by_name(ctx.sink)
        assert metrics["mikrotik_wlan_interface_registered_clients"] == [(("wlan1", "5180/20-Ceee/ac"), 7.0)]


@pytest.mark.unit
class TestWirelessCollectors:
    """Тесты таблиц регистрации."""

    def test_wlansta(self, make_context):
        ctx, _ = make_context({"/interface/wireless/registration-table/print": reply({
            "interface": "wlan1",
            "mac-address": "AA:BB:CC:00:11:22",
            "signal-strength": "-62@HT20",
            "signal-to-noise": "40",
            "bytes": "1000,2000",
            "packets": "10,20",
        })})
        WlanSTACollector().collect(ctx)

        metrics = by_name(ctx.sink)
        labels = ("wlan1", "AA:BB:CC:00:11:22")
        assert metrics["mikrotik_wlan_station_signal_strength"] == [(labels, -62.0)]
        assert metrics["mikrotik_wlan_station_tx_bytes"] == [(labels, 1000.0)]
        assert metrics["mikrotik_wlan_station_rx_bytes"] == [(labels, 2000.0)]
        assert metrics["mikrotik_wlan_station_rx_packets"] == [(labels, 20.0)]
        assert "mikrotik_wlan_station_tx_frames" not in metrics

    def test_capsman(self, make_context):
        ctx, _ = make_context({"/caps-man/registration-table/print": reply({
            "interface": "cap1",
            "mac-address": "AA:BB:CC:00:11:22",
            "ssid": "office",
            "uptime": "1h2m3s",
            "rx-signal": "-55@5GHz",
        })})
        CapsmanCollector().collect(ctx)

        metrics = by_name(ctx.sink)
        labels = ("cap1", "AA:BB:CC:00:11:22", "office")
        assert metrics["mikrotik_capsman_clients_uptime_seconds"] == [(labels, 3723.0)]
        assert metrics["mikrotik_capsman_clients_rx_signal"] == [(labels, -55.0)]


@pytest.mark.unit
class TestIPsecAndNetwatch:
    def test_ipsec(self, make_context):
        ctx, client = make_context({"/ip/ipsec/policy/print": reply({
            "src-address": "10.1.0.0/16",
            "dst-address": "10.2.0.0/16",
            "comment": "site-b",
            "ph2-state": "established",
            "invalid": "false",
            "active": "true",
        })})
        IPsecCollector().collect(ctx)

        assert client.calls[0][1:3] == ("?disabled=false", "?dynamic=false")
        labels = ("10.1.0.0/16-10.2.0.0/16", "site-b")
        assert samples(ctx.sink) == [
            ("mikrotik_ipsec_ph2_state", labels, 1.0),
            ("mikrotik_ipsec_invalid", labels, 0.0),
            ("mikrotik_ipsec_active", labels, 1.0),
        ]

    def test_netwatch(self, make_context):
        ctx, _ = make_context({"/tool/netwatch/print": reply(
            {"host": "8.8.8.8", "comment": "dns", "status": "up"},
            {"host": "10.9.9.9", "comment": "", "status": "down"},
            {"host": "10.9.9.8", "comment": "", "status": "flapping"},
        )})
        NetwatchCollector().collect(ctx)
        assert samples(ctx.sink) == [
            ("mikrotik_netwatch_status", ("8.8.8.8", "dns"), 1.0),
            ("mikrotik_netwatch_status", ("10.9.9.9", ""), -1.0),
        ]
