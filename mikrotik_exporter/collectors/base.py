"""
Базовый класс коллектора метрик.

Коллектор описывает свои метрики таблицей свойств (PROPERTIES):
свойство RouterOS -> правило нормализации -> описание метрики.
Описания строятся один раз в __init__ и доступны через describe()
до любого скрейпа.

Ошибки:
- ошибка запроса (QueryError и др.) пробрасывается и прерывает скрейп
  устройства целиком;
- ошибка разбора значения логируется, пропускается одно наблюдение.

Пример создания коллектора:
    class ConntrackCollector(PropertyTableCollector):
        name = "conntrack"
        subsystem = "conntrack"
        command = "/ip/firewall/connection/tracking/print"
        properties = (
            Prop("total-entries", name="entries", help="Number of tracked connections"),
        )
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from ..core.client import Record
from ..core.context import ScrapeContext
from ..core.domain.values import NUMBER, Rule, split_dual_counter
from ..core.exceptions import ValueParseError
from ..core.metrics import MetricDescriptor, ValueKind, metric_name


@dataclass(frozen=True)
class Prop:
    """
    Свойство RouterOS, превращаемое в метрику.

    Attributes:
        key: Имя свойства в ответе API (rx-byte)
        rule: Правило нормализации
        kind: gauge или counter
        name: Имя метрики (по умолчанию key с "_" вместо "-")
        help: Текст HELP (по умолчанию key)
    """
    key: str
    rule: Rule = NUMBER
    kind: ValueKind = ValueKind.GAUGE
    name: Optional[str] = None
    help: Optional[str] = None

    @property
    def metric_name(self) -> str:
        return self.name or metric_name(self.key)


def proplist(keys: Sequence[str]) -> str:
    """Слово =.proplist= с перечнем колонок."""
    return "=.proplist=" + ",".join(keys)


class BaseCollector(ABC):
    """
    Абстрактный базовый класс для коллекторов.

    Attributes:
        name: Имя флага в секции features
        subsystem: Подсистема в имени метрик
        label_names: Лейблы всех метрик коллектора
        properties: Числовые свойства
        dual_counters: Свойства вида "tx,rx" -> tx_<name> и rx_<name>
    """

    name: str = ""
    subsystem: str = ""
    label_names: Tuple[str, ...] = ()
    properties: Tuple[Prop, ...] = ()
    dual_counters: Tuple[str, ...] = ()

    def __init__(self):
        self._descriptors: Dict[str, MetricDescriptor] = {}
        for prop in self.properties:
            self._descriptors[prop.key] = MetricDescriptor(
                subsystem=self.subsystem,
                name=prop.metric_name,
                help=prop.help or prop.key,
                label_names=self.label_names,
                kind=prop.kind,
            )
        for key in self.dual_counters:
            for direction, verb in (("tx", "transmitted"), ("rx", "received")):
                self._descriptors[f"{direction}:{key}"] = MetricDescriptor(
                    subsystem=self.subsystem,
                    name=f"{direction}_{metric_name(key)}",
                    help=f"number of {key} {verb}",
                    label_names=self.label_names,
                    kind=ValueKind.COUNTER,
                )

    def describe(self) -> List[MetricDescriptor]:
        """Описания метрик коллектора."""
        return list(self._descriptors.values())

    def descriptor(self, key: str) -> MetricDescriptor:
        return self._descriptors[key]

    @abstractmethod
    def collect(self, ctx: ScrapeContext) -> None:
        """
        Собирает метрики с устройства в ctx.sink.

        Raises:
            CollectorError: Запрос к устройству не выполнен
        """

    def collect_record(
        self,
        ctx: ScrapeContext,
        record: Record,
        label_values: Sequence[str],
    ) -> None:
        """Наблюдения по одной строке ответа в порядке объявления свойств."""
        for prop in self.properties:
            self.collect_property(ctx, prop, record.get(prop.key, ""), label_values)
        for key in self.dual_counters:
            self.collect_dual_counter(ctx, key, record.get(key, ""), label_values)

    def collect_property(
        self,
        ctx: ScrapeContext,
        prop: Prop,
        raw: str,
        label_values: Sequence[str],
    ) -> None:
        try:
            value = prop.rule.apply(raw)
        except ValueParseError as e:
            self._log_parse_error(ctx, prop.key, raw, e)
            return
        if value is None:
            return
        ctx.emit(self._descriptors[prop.key], value, *label_values)

    def collect_dual_counter(
        self,
        ctx: ScrapeContext,
        key: str,
        raw: str,
        label_values: Sequence[str],
    ) -> None:
        if raw == "":
            return
        try:
            tx, rx = split_dual_counter(raw)
        except ValueParseError as e:
            self._log_parse_error(ctx, key, raw, e)
            return
        ctx.emit(self._descriptors[f"tx:{key}"], tx, *label_values)
        ctx.emit(self._descriptors[f"rx:{key}"], rx, *label_values)

    def fetch_names(self, ctx: ScrapeContext, command: str, *words: str) -> List[str]:
        """Имена сущностей (интерфейсов, серверов, пулов) для вторичных запросов."""
        reply = ctx.run(command, *words, "=.proplist=name")
        return [row["name"] for row in reply.rows if row.get("name")]

    def fetch_count(self, ctx: ScrapeContext, command: str, *words: str) -> str:
        """Значение ret для запроса с =count-only=."""
        reply = ctx.run(command, *words, "=count-only=")
        return (reply.done or {}).get("ret", "")

    def emit_count(self, ctx: ScrapeContext, key: str, raw: str, *label_values: str) -> None:
        """Наблюдение из ret запроса =count-only= (пустой ret = нет данных)."""
        try:
            value = NUMBER.apply(raw)
        except ValueParseError as e:
            self._log_parse_error(ctx, key, raw, e)
            return
        if value is not None:
            ctx.emit(self._descriptors[key], value, *label_values)

    def _log_parse_error(
        self,
        ctx: ScrapeContext,
        key: str,
        raw: str,
        error: ValueParseError,
    ) -> None:
        ctx.logger.error(
            f"Ошибка разбора значения: {error.message}",
            collector=self.name,
            property=key,
            value=raw,
        )


class PropertyTableCollector(BaseCollector):
    """
    Коллектор с одним запросом: строка ответа -> лейблы + свойства.

    Attributes:
        command: Команда RouterOS API
        query: Фильтры (?disabled=false)
        label_keys: Свойства строки, дающие значения лейблов
        use_proplist: Запрашивать только нужные колонки
    """

    command: str = ""
    query: Tuple[str, ...] = ()
    label_keys: Tuple[str, ...] = ()
    use_proplist: bool = True

    def request_words(self) -> List[str]:
        words = list(self.query)
        if self.use_proplist:
            keys = list(self.label_keys)
            keys += [prop.key for prop in self.properties]
            keys += list(self.dual_counters)
            words.append(proplist(list(dict.fromkeys(keys))))
        return words

    def collect(self, ctx: ScrapeContext) -> None:
        reply = ctx.run(self.command, *self.request_words())
        for record in reply.rows:
            self.collect_record(ctx, record, self.labels_for(record))

    def labels_for(self, record: Record) -> Tuple[str, ...]:
        return tuple(record.get(key, "") for key in self.label_keys)


class MonitorCollector(BaseCollector):
    """
    Коллектор с двумя стадиями: список имён, затем monitor по именам.

    По умолчанию monitor вызывается один раз для всех имён
    (=numbers=a,b,c), строки ответа сопоставляются по name.
    С per_entity = True monitor вызывается отдельно для каждого имени.

    Attributes:
        list_command: Команда для получения имён
        list_query: Фильтры для списка
        monitor_command: Команда monitor/info
        numbers_word: Имя аргумента со списком (numbers или number)
        per_entity: Отдельный запрос на каждое имя
    """

    list_command: str = ""
    list_query: Tuple[str, ...] = ()
    monitor_command: str = ""
    numbers_word: str = "numbers"
    per_entity: bool = False
    monitor_keys: Tuple[str, ...] = ()
    label_names: Tuple[str, ...] = ("interface",)

    def accept_name(self, name: str) -> bool:
        return True

    def collect(self, ctx: ScrapeContext) -> None:
        names = [
            name
            for name in self.fetch_names(ctx, self.list_command, *self.list_query)
            if self.accept_name(name)
        ]
        if not names:
            return

        keys = list(self.monitor_keys) + [prop.key for prop in self.properties]
        if self.per_entity:
            for name in names:
                reply = ctx.run(
                    self.monitor_command,
                    f"={self.numbers_word}={name}",
                    "=once=",
                    proplist(keys),
                )
                for record in reply.rows:
                    self.collect_record(ctx, record, self.labels_for(name, record))
            return

        reply = ctx.run(
            self.monitor_command,
            f"={self.numbers_word}={','.join(names)}",
            "=once=",
            proplist(["name"] + keys),
        )
        for record in reply.rows:
            self.collect_record(ctx, record, self.labels_for(record.get("name", ""), record))

    def labels_for(self, name: str, record: Record) -> Tuple[str, ...]:
        return (name,)
