"""Historial acotado de cálculos completados, con persistencia.

Las entradas se guardan de la más reciente a la más antigua. Tras
cada cambio la lista completa se serializa como JSON y se escribe en
el almacén clave-valor bajo una clave fija.
"""

from __future__ import annotations

import json
import logging
import re
import time
from dataclasses import asdict, dataclass

log = logging.getLogger("calculadora.history")

STORAGE_KEY = "calculatorHistory"
MAX_ENTRIES = 50

# Los resultados vuelven al motor como operando: solo decimales planos.
_RESULT_RE = re.compile(r"-?\d+(?:\.\d*)?")


@dataclass(frozen=True)
class HistoryEntry:
    """Un cálculo completado; ``timestamp`` en milisegundos Unix."""

    expression: str
    result: str
    timestamp: int

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data) -> HistoryEntry:
        if not isinstance(data, dict):
            raise ValueError(f"Entrada de historial inválida: {data!r}")

        expression = data.get("expression")
        result = data.get("result")
        timestamp = data.get("timestamp")
        if not isinstance(expression, str) or not isinstance(result, str):
            raise ValueError(f"Entrada de historial inválida: {data!r}")
        if not _RESULT_RE.fullmatch(result):
            raise ValueError(f"Resultado no numérico: {result!r}")
        if isinstance(timestamp, bool) or not isinstance(timestamp, int):
            raise ValueError(f"Marca de tiempo inválida: {timestamp!r}")

        return cls(expression=expression, result=result, timestamp=timestamp)


class HistoryLedger:
    """Registro ordenado (más reciente primero) con capacidad fija.

    Al superar la capacidad se descarta la entrada más antigua. Los
    oyentes registrados con ``add_listener`` reciben la tupla de
    entradas después de cada cambio.
    """

    def __init__(self, store, key: str = STORAGE_KEY,
                 capacity: int = MAX_ENTRIES, clock=time.time):
        if capacity < 1:
            raise ValueError("La capacidad debe ser positiva")
        self._store = store
        self._key = key
        self._capacity = capacity
        self._clock = clock
        self._entries: list[HistoryEntry] = []
        self._listeners = []

    # ── Consulta ─────────────────────────────────────────────────

    @property
    def entries(self) -> tuple[HistoryEntry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(tuple(self._entries))

    def select_entry(self, index: int) -> str | None:
        """Devuelve el resultado de la entrada ``index`` o None si no existe."""
        if 0 <= index < len(self._entries):
            return self._entries[index].result
        return None

    # ── Mutación ─────────────────────────────────────────────────

    def append(self, expression: str, result: str) -> HistoryEntry:
        entry = HistoryEntry(
            expression=expression,
            result=result,
            timestamp=int(self._clock() * 1000),
        )
        self._entries.insert(0, entry)
        del self._entries[self._capacity:]

        self._persist()
        self._notify()
        return entry

    def clear(self):
        self._entries.clear()
        self._persist()
        self._notify()

    # ── Persistencia ─────────────────────────────────────────────

    def load_from_storage(self):
        """Carga las entradas guardadas; un contenido corrupto se descarta."""
        self._entries = []
        payload = self._store.get(self._key)

        if payload is not None:
            try:
                self._entries = self._deserialize(payload)[: self._capacity]
            except ValueError as exc:
                log.warning("Historial guardado corrupto, se ignora: %s", exc)
            else:
                log.debug("Historial cargado: %d entradas", len(self._entries))

        self._notify()

    def serialize(self) -> str:
        return json.dumps(
            [entry.to_dict() for entry in self._entries],
            ensure_ascii=False,
        )

    @staticmethod
    def _deserialize(payload: str) -> list[HistoryEntry]:
        data = json.loads(payload)
        if not isinstance(data, list):
            raise ValueError("El historial debe ser una lista")
        return [HistoryEntry.from_dict(item) for item in data]

    def _persist(self):
        try:
            self._store.set(self._key, self.serialize())
        except OSError:
            log.exception("No se pudo guardar el historial")

    # ── Oyentes ──────────────────────────────────────────────────

    def add_listener(self, callback):
        self._listeners.append(callback)

    def _notify(self):
        entries = self.entries
        for callback in self._listeners:
            callback(entries)
