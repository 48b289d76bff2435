"""
Нормализация сырых значений RouterOS в числа.

RouterOS API отдаёт все значения строками: "3d3h42m53s", "1024,2048",
"-62@HT20", "true", "established". Здесь собраны чистые функции разбора
и правила (Rule), которые коллекторы привязывают к свойствам.

Соглашения:
- пустое значение обычного числового свойства = "нет данных", не ошибка;
- ошибка разбора — ValueParseError, коллектор пропускает одно наблюдение.

Пример использования:
    from mikrotik_exporter.core.domain.values import parse_duration, split_dual_counter

    parse_duration("3d3h42m53s")      # 272573
    split_dual_counter("1.2,2.1")     # (1.2, 2.1)
"""

import re
from typing import Dict, Optional, Tuple

from ..exceptions import ValueParseError


# Единицы длительности в порядке следования в строке RouterOS
DURATION_UNITS = (
    ("w", 604800),
    ("d", 86400),
    ("h", 3600),
    ("m", 60),
    ("s", 1),
)

_DURATION_RE = re.compile(
    r"(?:(\d*)w)?(?:(\d*)d)?(?:(\d*)h)?(?:(\d*)m)?(?:(\d*)s)?"
)

TRUE_VALUE = "true"


def parse_duration(raw: str) -> int:
    """
    Разбирает длительность RouterOS в секунды.

    Группы w/d/h/m/s необязательны, но идут строго в этом порядке и без
    разделителей. Пустая строка даёт 0.

    Args:
        raw: Строка вида "15w3d3h42m53s"

    Returns:
        int: Количество секунд

    Raises:
        ValueParseError: Цифры без единицы измерения ("59") или мусор

    Example:
        parse_duration("42m53s")  # 2573
        parse_duration("")        # 0
    """
    match = _DURATION_RE.fullmatch(raw)
    if match is None:
        raise ValueParseError("invalid duration value sent to regex", value=raw)

    total = 0
    for (_, seconds), count in zip(DURATION_UNITS, match.groups()):
        if count:
            total += int(count) * seconds
    return total


def split_dual_counter(raw: str) -> Tuple[float, float]:
    """
    Разбирает пару счётчиков "tx,rx".

    Лишние значения после второго игнорируются.

    Args:
        raw: Строка вида "1.2,2.1"

    Returns:
        Tuple[float, float]: (первое, второе)

    Raises:
        ValueParseError: Меньше двух чисел или пустая строка
    """
    parts = raw.split(",")
    if len(parts) < 2:
        raise ValueParseError("expected two comma separated values", value=raw)

    try:
        first = float(parts[0])
        second = float(parts[1])
    except ValueError:
        raise ValueParseError("invalid dual counter value", value=raw)
    return first, second


def truncate_suffix(raw: str, separator: str = "@") -> str:
    """
    Отбрасывает квалификатор после разделителя.

    Example:
        truncate_suffix("-62@HT20")  # "-62"
    """
    index = raw.find(separator)
    if index < 0:
        return raw
    return raw[:index]


def parse_number(raw: str) -> Optional[float]:
    """
    Разбирает десятичное число.

    Returns:
        Optional[float]: Число или None для пустого значения

    Raises:
        ValueParseError: Значение не является числом
    """
    if raw == "":
        return None
    try:
        return float(raw)
    except ValueError:
        raise ValueParseError("invalid numeric value", value=raw)


def parse_bool(raw: str, invert: bool = False) -> float:
    """
    "true" -> 1, всё остальное -> 0. invert меняет местами (флаги аварий SFP).
    """
    value = raw == TRUE_VALUE
    if invert:
        value = not value
    return 1.0 if value else 0.0


class StatusMap:
    """
    Табличное отображение статусов в числа.

    Attributes:
        mapping: Токен -> значение
        default: Значение для неизвестного токена. None = ошибка разбора

    Example:
        NETWATCH = StatusMap({"up": 1, "unknown": 0, "down": -1})
        NETWATCH.parse("down")  # -1.0
        NETWATCH.parse("flap")  # ValueParseError
    """

    def __init__(self, mapping: Dict[str, float], default: Optional[float] = None):
        self.mapping = dict(mapping)
        self.default = default

    def parse(self, raw: str) -> float:
        if raw in self.mapping:
            return float(self.mapping[raw])
        if self.default is None:
            raise ValueParseError("unexpected status value", value=raw)
        return float(self.default)


# Таблицы статусов, общие для нескольких коллекторов
NETWATCH_STATUS = StatusMap({"up": 1, "unknown": 0, "down": -1})
ESTABLISHED = StatusMap({"established": 1}, default=0)
ETHERNET_STATUS = StatusMap({"link-ok": 1}, default=0)
ETHERNET_RATE = StatusMap(
    {"10Mbps": 10, "100Mbps": 100, "1Gbps": 1000, "10Gbps": 10000},
    default=0,
)


# === Правила для таблиц свойств коллекторов ===

class Rule:
    """
    Правило нормализации одного свойства.

    apply() возвращает число или None (наблюдение не создаётся).
    Пустое значение по умолчанию означает отсутствие данных.
    """

    skip_empty = True

    def apply(self, raw: str) -> Optional[float]:
        if raw == "" and self.skip_empty:
            return None
        return self.convert(raw)

    def convert(self, raw: str) -> Optional[float]:
        raise NotImplementedError


class NumberRule(Rule):
    """Десятичное число, с опциональным отсечением "@qualifier"."""

    def __init__(self, truncate_at: Optional[str] = None):
        self.truncate_at = truncate_at

    def convert(self, raw: str) -> Optional[float]:
        if self.truncate_at:
            raw = truncate_suffix(raw, self.truncate_at)
        return parse_number(raw)


class DurationRule(Rule):
    """Длительность в секундах. Пустая строка = 0."""

    skip_empty = False

    def convert(self, raw: str) -> Optional[float]:
        return float(parse_duration(truncate_suffix(raw)))


class BoolRule(Rule):
    """"true" -> 1, иначе 0 (или наоборот при invert)."""

    def __init__(self, invert: bool = False):
        self.invert = invert

    def convert(self, raw: str) -> Optional[float]:
        return parse_bool(raw, invert=self.invert)


class StatusRule(Rule):
    """Значение из таблицы статусов."""

    def __init__(self, status_map: StatusMap, skip_empty: bool = True):
        self.status_map = status_map
        self.skip_empty = skip_empty

    def convert(self, raw: str) -> Optional[float]:
        return self.status_map.parse(raw)


NUMBER = NumberRule()
NUMBER_AT = NumberRule(truncate_at="@")
DURATION = DurationRule()
BOOL = BoolRule()
BOOL_INVERTED = BoolRule(invert=True)
