"""Aritmética de operandos para la calculadora de escritorio.

El motor de cálculo no opera con números directamente: delega en un
"backend" aritmético que sabe convertir texto a número, aplicar los
cuatro operadores, redondear y volver a texto. Este módulo provee el
backend por defecto sobre ``float``; ``arbitrary_precision_arithmetic``
provee la alternativa basada en mpmath.

Contrato de interfaz:
    - parse(text: str) -> número        (ValueError si no es numérico)
    - apply(op, a, b) -> número         (ZeroDivisionError, OverflowError)
    - round(value) -> número            (9 decimales, mitad lejos de cero)
    - to_string(value) -> str           (decimal plano, sin exponente)
"""

import math
import operator
from decimal import Decimal
from enum import Enum


class OperatorKind(Enum):
    """Operadores binarios; el valor es la tecla que los produce."""

    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"

    @property
    def symbol(self) -> str:
        """Símbolo tipográfico que se muestra en la traza de expresión."""
        return _SYMBOLS[self]


_SYMBOLS = {
    OperatorKind.ADD: "+",
    OperatorKind.SUBTRACT: "−",
    OperatorKind.MULTIPLY: "×",
    OperatorKind.DIVIDE: "÷",
}

ROUND_DECIMALS = 9


class FloatArithmetic:
    """Backend en coma flotante binaria (``float`` de Python)."""

    _OPERATIONS = {
        OperatorKind.ADD: operator.add,
        OperatorKind.SUBTRACT: operator.sub,
        OperatorKind.MULTIPLY: operator.mul,
        OperatorKind.DIVIDE: operator.truediv,
    }

    def __init__(self, decimals: int = ROUND_DECIMALS):
        self._scale = 10 ** decimals

    # ── Conversión ───────────────────────────────────────────────

    def parse(self, text: str) -> float:
        value = float(text)
        if not math.isfinite(value):
            raise ValueError(f"Operando no numérico: {text!r}")
        return value

    @staticmethod
    def to_string(value: float) -> str:
        if value == 0:
            return "0"
        text = format(Decimal(repr(value)), "f")
        if "." in text:
            text = text.rstrip("0").rstrip(".")
        return text

    # ── Operaciones ──────────────────────────────────────────────

    def apply(self, op: OperatorKind, a: float, b: float) -> float:
        """Aplica ``op`` a ``a`` y ``b``.

        Raises:
            ZeroDivisionError: división con divisor exactamente cero.
            OverflowError: el resultado no es finito.
        """
        if op is OperatorKind.DIVIDE and b == 0:
            raise ZeroDivisionError("División por cero")

        value = self._OPERATIONS[op](a, b)
        if not math.isfinite(value):
            raise OverflowError("Resultado fuera de rango")
        return value

    def round(self, value: float) -> float:
        # Todo float >= 2**52 ya es entero; evita desbordar value * scale.
        if value.is_integer():
            return value
        scaled = math.floor(abs(value) * self._scale + 0.5)
        return math.copysign(scaled, value) / self._scale
