"""Traduce teclas y botones del teclado numérico a acciones del motor.

Tanto los clics en el teclado de la ventana como las pulsaciones del
teclado físico terminan en el mismo conjunto de acciones.
"""

from __future__ import annotations

from typing import NamedTuple

DIGIT = "digit"
DECIMAL = "decimal"
OPERATOR = "operator"
CLEAR = "clear"
DELETE = "delete"
PERCENT = "percent"
EQUALS = "equals"

ACTION_KINDS = (DIGIT, DECIMAL, OPERATOR, CLEAR, DELETE, PERCENT, EQUALS)


class Action(NamedTuple):
    kind: str
    value: str | None = None


_SIMPLE_KEYS = {
    ".": Action(DECIMAL),
    "Enter": Action(EQUALS),
    "=": Action(EQUALS),
    "Escape": Action(CLEAR),
    "c": Action(CLEAR),
    "C": Action(CLEAR),
    "Backspace": Action(DELETE),
    "%": Action(PERCENT),
}

_OPERATOR_KEYS = "+-*/"

# keysym de Tk -> nombre de tecla
_KEYSYM_NAMES = {
    "Return": "Enter",
    "KP_Enter": "Enter",
    "Escape": "Escape",
    "BackSpace": "Backspace",
    "KP_Add": "+",
    "KP_Subtract": "-",
    "KP_Multiply": "*",
    "KP_Divide": "/",
    "KP_Decimal": ".",
}


def action_for_key(key: str) -> Action | None:
    """Acción asociada a una tecla, o None si la tecla no se reconoce."""
    if len(key) == 1 and "0" <= key <= "9":
        return Action(DIGIT, key)
    if len(key) == 1 and key in _OPERATOR_KEYS:
        return Action(OPERATOR, key)
    return _SIMPLE_KEYS.get(key)


def key_from_event(char: str, keysym: str) -> str | None:
    """Nombre de tecla para un evento ``<Key>`` de tkinter."""
    if keysym in _KEYSYM_NAMES:
        return _KEYSYM_NAMES[keysym]
    if len(char) == 1 and char.isprintable():
        return char
    return None


def action_for_command(command: str) -> Action:
    """Interpreta el comando de un botón: ``"digit:7"``, ``"equals"``...

    Raises:
        ValueError: comando desconocido.
    """
    kind, _, value = command.partition(":")
    if kind not in ACTION_KINDS:
        raise ValueError(f"Comando desconocido: {command!r}")
    if kind in (DIGIT, OPERATOR) and not value:
        raise ValueError(f"Falta el valor en el comando {command!r}")
    return Action(kind, value or None)
