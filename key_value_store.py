"""Almacenes clave-valor para persistir el historial.

Contrato de interfaz:
    - get(key: str) -> str | None   (clave ausente -> None)
    - set(key: str, value: str)
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

log = logging.getLogger("calculadora.store")


class MemoryStore:
    """Almacén en memoria; útil para pruebas y sesiones sin disco."""

    def __init__(self, initial: dict | None = None):
        self._data = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str):
        self._data[key] = value


class JsonFileStore:
    """Almacén respaldado por un archivo JSON con un objeto en la raíz.

    Cada ``set`` reescribe el archivo completo a través de un archivo
    temporal y ``os.replace``, de modo que un fallo a mitad de escritura
    no deja el archivo truncado.
    """

    def __init__(self, path):
        self._path = Path(path)

    def get(self, key: str) -> str | None:
        value = self._read().get(key)
        if value is not None and not isinstance(value, str):
            log.warning("Valor no textual para la clave %r en %s", key, self._path)
            return None
        return value

    def set(self, key: str, value: str):
        data = self._read()
        data[key] = value

        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self._path)
        except Exception:
            tmp_path.unlink(missing_ok=True)
            raise

    def _read(self) -> dict:
        if not self._path.exists():
            return {}

        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except ValueError:
            log.warning("Archivo de almacenamiento corrupto: %s", self._path)
            return {}
        except OSError as exc:
            log.warning("No se pudo leer %s: %s", self._path, exc)
            return {}

        if not isinstance(data, dict):
            log.warning("Formato inesperado en %s; se ignora", self._path)
            return {}
        return data
