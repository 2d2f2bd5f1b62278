"""
Motor de estado de la calculadora de escritorio.

Este módulo provee la clase CalculatorEngine, la máquina de estados
que recibe acciones de entrada (dígitos, punto, operadores, control)
y mantiene el operando en edición, el operando y operador pendientes
y la traza de expresión. No conoce la interfaz: notifica cada cambio
a los oyentes registrados con un DisplayState ya formateado.

La aritmética se delega en un backend intercambiable (ver
``arithmetic``); los cálculos completados se anotan en un
HistoryLedger si se proporciona uno.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

import input_adapter
from arithmetic import FloatArithmetic, OperatorKind

log = logging.getLogger("calculadora.engine")

ERROR_TEXT = "Error"
COMPACT_THRESHOLD = 12

_NUMBER_RE = re.compile(r"^(?P<sign>-?)(?P<int>\d+)(?P<rest>\.\d*)?$")


def format_display_value(value: str) -> str:
    """Agrupa la parte entera con comas y deja intacta la fraccionaria.

    ``"12345.6"`` -> ``"12,345.6"``; ``"12345."`` -> ``"12,345."``.
    Cualquier texto no numérico (``"Error"``) se devuelve sin cambios.
    Solo sirve para mostrar: nunca debe volver a interpretarse.
    """
    match = _NUMBER_RE.fullmatch(value)
    if not match:
        return value
    grouped = f"{int(match.group('int')):,}"
    return f"{match.group('sign')}{grouped}{match.group('rest') or ''}"


@dataclass
class CalculatorState:
    current_operand: str = "0"
    previous_operand: str | None = None
    pending_operator: OperatorKind | None = None
    expression_trail: str = ""
    awaiting_fresh_input: bool = False


@dataclass(frozen=True)
class DisplayState:
    operand: str
    expression: str
    compact: bool


class CalculatorEngine:
    """Máquina de estados de una sesión de calculadora."""

    def __init__(self, ledger=None, arithmetic=None):
        self._arithmetic = arithmetic if arithmetic is not None else FloatArithmetic()
        self._ledger = ledger
        self._listeners = []
        self.state = CalculatorState()

    # ── Consulta ─────────────────────────────────────────────────

    @property
    def current_operand(self) -> str:
        return self.state.current_operand

    @property
    def display_state(self) -> DisplayState:
        operand = format_display_value(self.state.current_operand)
        return DisplayState(
            operand=operand,
            expression=self.state.expression_trail,
            compact=len(operand) > COMPACT_THRESHOLD,
        )

    def add_listener(self, callback):
        """Registra ``callback(DisplayState)``; se invoca tras cada cambio."""
        self._listeners.append(callback)

    # ── Entrada de operandos ─────────────────────────────────────

    def input_digit(self, digit: str):
        if len(digit) != 1 or not "0" <= digit <= "9":
            raise ValueError(f"Dígito inválido: {digit!r}")

        s = self.state
        if s.awaiting_fresh_input:
            s.current_operand = digit
            s.awaiting_fresh_input = False
        elif s.current_operand == "0":
            s.current_operand = digit
        else:
            s.current_operand += digit
        self._notify()

    def input_decimal_point(self):
        s = self.state
        if s.awaiting_fresh_input:
            s.current_operand = "0."
            s.awaiting_fresh_input = False
        elif "." not in s.current_operand:
            s.current_operand += "."
        self._notify()

    def delete_last_char(self):
        s = self.state
        cur = s.current_operand
        if (
            cur == ERROR_TEXT
            or len(cur) == 1
            or (len(cur) == 2 and cur.startswith("-"))
        ):
            s.current_operand = "0"
        else:
            s.current_operand = cur[:-1]
        self._notify()

    def percent(self):
        s = self.state
        try:
            value = self._arithmetic.parse(s.current_operand)
        except ValueError:
            return
        hundred = self._arithmetic.parse("100")
        value = self._arithmetic.apply(OperatorKind.DIVIDE, value, hundred)
        s.current_operand = self._arithmetic.to_string(value)
        self._notify()

    # ── Operadores ───────────────────────────────────────────────

    def input_operator(self, op):
        op = OperatorKind(op)
        s = self.state

        # Encadenado: "2 + 3 +" resuelve "2 + 3" sin anotarlo.
        if s.pending_operator is not None and not s.awaiting_fresh_input:
            self.calculate(record_history=False)

        s.previous_operand = s.current_operand
        s.pending_operator = op
        s.expression_trail = f"{format_display_value(s.previous_operand)} {op.symbol}"
        s.awaiting_fresh_input = True
        self._notify()

    def calculate(self, record_history: bool = True):
        s = self.state
        if s.pending_operator is None:
            return

        arith = self._arithmetic
        try:
            left = arith.parse(s.previous_operand)
            right = arith.parse(s.current_operand)
            value = arith.apply(s.pending_operator, left, right)
        except ZeroDivisionError:
            log.info("División por cero: %s %s", s.expression_trail, s.current_operand)
            self.enter_error_state()
            return
        except (ValueError, OverflowError) as exc:
            log.warning("Cálculo no válido (%s): %s %s",
                        exc, s.expression_trail, s.current_operand)
            self.enter_error_state()
            return

        full_expression = f"{s.expression_trail} {format_display_value(s.current_operand)}"
        result = arith.to_string(arith.round(value))
        log.debug("%s = %s", full_expression, result)

        s.current_operand = result
        if record_history and self._ledger is not None:
            self._ledger.append(full_expression, result)

        s.expression_trail = ""
        s.previous_operand = None
        s.pending_operator = None
        s.awaiting_fresh_input = True
        self._notify()

    # ── Control ──────────────────────────────────────────────────

    def clear_all(self):
        self.state = CalculatorState()
        self._notify()

    def enter_error_state(self):
        """Muestra ``"Error"``; el operador pendiente se conserva."""
        self.state.current_operand = ERROR_TEXT
        self.state.awaiting_fresh_input = True
        self._notify()

    def load_history_entry(self, index: int):
        if self._ledger is None:
            return
        result = self._ledger.select_entry(index)
        if result is None:
            return
        self.state.current_operand = result
        self._notify()

    def dispatch(self, action: input_adapter.Action):
        kind = action.kind
        if kind == input_adapter.DIGIT:
            self.input_digit(action.value)
        elif kind == input_adapter.DECIMAL:
            self.input_decimal_point()
        elif kind == input_adapter.OPERATOR:
            self.input_operator(action.value)
        elif kind == input_adapter.CLEAR:
            self.clear_all()
        elif kind == input_adapter.DELETE:
            self.delete_last_char()
        elif kind == input_adapter.PERCENT:
            self.percent()
        elif kind == input_adapter.EQUALS:
            self.calculate()
        else:
            raise ValueError(f"Acción desconocida: {kind!r}")

    # ── Notificación ─────────────────────────────────────────────

    def _notify(self):
        state = self.display_state
        for callback in self._listeners:
            callback(state)
