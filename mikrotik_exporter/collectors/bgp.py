"""
Коллектор BGP сессий (/routing/bgp/peer/print).
"""

from ..core.domain.values import ESTABLISHED, StatusRule
from .base import Prop, PropertyTableCollector


class BGPCollector(PropertyTableCollector):
    """
    Состояние и счётчики BGP пиров.

    state отображается в метрику up: established = 1, иначе 0
    (в том числе для пустого значения).
    """

    name = "bgp"
    subsystem = "bgp"
    command = "/routing/bgp/peer/print"
    label_keys = ("name", "remote-as")
    label_names = ("session", "asn")
    properties = (
        Prop(
            "state",
            rule=StatusRule(ESTABLISHED, skip_empty=False),
            name="up",
            help="BGP session is established (up = 1)",
        ),
        Prop("prefix-count", help="number of prefixes received"),
        Prop("updates-sent", help="number of updates sent"),
        Prop("updates-received", help="number of updates received"),
        Prop("withdrawn-sent", help="number of withdrawn sent"),
        Prop("withdrawn-received", help="number of withdrawn received"),
    )
