"""
Коллектор IPsec политик (/ip/ipsec/policy/print).
"""

from typing import Tuple

from ..core.client import Record
from ..core.domain.values import BOOL, ESTABLISHED, StatusRule
from .base import Prop, PropertyTableCollector


class IPsecCollector(PropertyTableCollector):
    """
    Состояние фазы 2 и флаги статических политик.

    Лейбл srcdst = "<src-address>-<dst-address>".
    """

    name = "ipsec"
    subsystem = "ipsec"
    command = "/ip/ipsec/policy/print"
    query = ("?disabled=false", "?dynamic=false")
    label_keys = ("src-address", "dst-address", "comment")
    label_names = ("srcdst", "comment")
    properties = (
        Prop("ph2-state", rule=StatusRule(ESTABLISHED), help="phase 2 is established (1 = established)"),
        Prop("invalid", rule=BOOL),
        Prop("active", rule=BOOL),
    )

    def labels_for(self, record: Record) -> Tuple[str, ...]:
        srcdst = f"{record.get('src-address', '')}-{record.get('dst-address', '')}"
        return srcdst, record.get("comment", "")
