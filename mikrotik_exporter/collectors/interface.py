"""
Коллектор счётчиков интерфейсов (/interface/print).
"""

from ..core.domain.values import BOOL
from ..core.metrics import ValueKind
from .base import Prop, PropertyTableCollector

COUNTER = ValueKind.COUNTER


class InterfaceCollector(PropertyTableCollector):
    """
    Трафик, ошибки и состояние всех интерфейсов.

    running и actual-mtu экспортируются как gauge, остальное как counter.
    """

    name = "interface"
    subsystem = "interface"
    command = "/interface/print"
    label_keys = ("name", "type", "disabled", "comment", "running", "slave")
    label_names = ("interface", "type", "disabled", "comment", "running", "slave")
    properties = (
        Prop("actual-mtu"),
        Prop("running", rule=BOOL),
        Prop("rx-byte", kind=COUNTER),
        Prop("tx-byte", kind=COUNTER),
        Prop("rx-packet", kind=COUNTER),
        Prop("tx-packet", kind=COUNTER),
        Prop("rx-error", kind=COUNTER),
        Prop("tx-error", kind=COUNTER),
        Prop("rx-drop", kind=COUNTER),
        Prop("tx-drop", kind=COUNTER),
        Prop("link-downs", kind=COUNTER),
    )
