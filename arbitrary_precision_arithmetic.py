"""Backend aritmético de precisión arbitraria basado en mpmath."""

from __future__ import annotations

from decimal import Decimal

from arithmetic import ROUND_DECIMALS, OperatorKind

try:
    from mpmath import mp
except ImportError as exc:  # pragma: no cover
    raise ImportError(
        "mpmath no está instalado. Instala con: pip install mpmath"
    ) from exc


class MPMathArithmetic:
    """Opera con ``mpf`` a ``working_digits`` dígitos significativos.

    Los operandos largos se convierten sin pérdida, de modo que
    ``12345678901234567890 + 1`` da el entero exacto en vez del
    valor redondeado que daría un ``float``.
    """

    # Dígitos de guarda que no se muestran al convertir a texto.
    GUARD_DIGITS = 10

    def __init__(self, working_digits: int = 120, decimals: int = ROUND_DECIMALS):
        self._digits = max(30, working_digits)
        with mp.workdps(self._digits):
            self._scale = mp.mpf(10) ** decimals
            self._half = mp.mpf("0.5")

    # ── Conversión ───────────────────────────────────────────────

    def parse(self, text: str):
        if text.endswith("."):
            text = text[:-1]
        with mp.workdps(self._digits):
            value = mp.mpf(text)
        if not mp.isfinite(value):
            raise ValueError(f"Operando no numérico: {text!r}")
        return value

    def to_string(self, value) -> str:
        with mp.workdps(self._digits):
            if value == 0:
                return "0"
            if mp.floor(value) == value:
                return str(int(value))
            text = mp.nstr(value, n=self._digits - self.GUARD_DIGITS)
        # nstr recurre a notación científica fuera de su rango fijo.
        text = format(Decimal(text), "f")
        if "." in text:
            text = text.rstrip("0").rstrip(".")
        return text

    # ── Operaciones ──────────────────────────────────────────────

    def apply(self, op: OperatorKind, a, b):
        if op is OperatorKind.DIVIDE and b == 0:
            raise ZeroDivisionError("División por cero")

        with mp.workdps(self._digits):
            if op is OperatorKind.ADD:
                value = a + b
            elif op is OperatorKind.SUBTRACT:
                value = a - b
            elif op is OperatorKind.MULTIPLY:
                value = a * b
            else:
                value = a / b

        if not mp.isfinite(value):
            raise OverflowError("Resultado fuera de rango")
        return value

    def round(self, value):
        with mp.workdps(self._digits):
            if mp.floor(value) == value:
                return value
            scaled = mp.floor(abs(value) * self._scale + self._half)
            return mp.sign(value) * scaled / self._scale
