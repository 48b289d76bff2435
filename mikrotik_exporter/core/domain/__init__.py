"""
Domain Layer — нормализация значений RouterOS.

Не зависит от сессий и коллекторов: работает только с сырыми строками.
"""

from .values import (
    parse_duration,
    split_dual_counter,
    truncate_suffix,
    parse_number,
    parse_bool,
    StatusMap,
    Rule,
    NumberRule,
    DurationRule,
    BoolRule,
    StatusRule,
    NUMBER,
    NUMBER_AT,
    DURATION,
    BOOL,
    BOOL_INVERTED,
    NETWATCH_STATUS,
    ESTABLISHED,
    ETHERNET_STATUS,
    ETHERNET_RATE,
)

__all__ = [
    "parse_duration",
    "split_dual_counter",
    "truncate_suffix",
    "parse_number",
    "parse_bool",
    "StatusMap",
    "Rule",
    "NumberRule",
    "DurationRule",
    "BoolRule",
    "StatusRule",
    "NUMBER",
    "NUMBER_AT",
    "DURATION",
    "BOOL",
    "BOOL_INVERTED",
    "NETWATCH_STATUS",
    "ESTABLISHED",
    "ETHERNET_STATUS",
    "ETHERNET_RATE",
]
