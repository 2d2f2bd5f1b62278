"""
Interfaz gráfica de la calculadora de escritorio.

Usa tkinter. La ventana no guarda estado aritmético: reenvía cada
pulsación al motor como una acción y repinta lo que el motor y el
historial le notifican.
"""

import logging
import tkinter as tk
from tkinter import font as tkfont

from calculator_engine import CalculatorEngine, DisplayState, format_display_value
from input_adapter import action_for_command, action_for_key, key_from_event

log = logging.getLogger("calculadora.ui")


class CalculatorApp:
    """Ventana principal: pantalla, teclado y panel de historial."""

    PRESS_MS = 100
    EMPTY_HISTORY_TEXT = "Historial vacío"

    # ── Paleta de colores ────────────────────────────────────────
    C = {
        "bg":         "#1E1E2E",
        "display_bg": "#181825",
        "num":        "#313244",
        "num_fg":     "#CDD6F4",
        "op":         "#F38BA8",
        "op_fg":      "#1E1E2E",
        "special":    "#585B70",
        "special_fg": "#CDD6F4",
        "equals":     "#89B4FA",
        "equals_fg":  "#1E1E2E",
        "pressed":    "#7F849C",
        "expr_fg":    "#BAC2DE",
        "result_fg":  "#A6E3A1",
        "history_bg": "#181825",
        "history_fg": "#CDD6F4",
        "muted_fg":   "#6C7086",
    }

    # ── Definiciones del teclado ─────────────────────────────────
    #  Cada fila es una lista de (texto, comando, tipo_color)
    #  tipo_color: "num", "op", "special", "equals"

    KEYPAD = [
        [("C",  "clear",   "special"), ("⌫", "delete", "special"),
         ("%",  "percent", "special"), ("÷", "operator:/", "op")],

        [("7",  "digit:7", "num"), ("8", "digit:8", "num"),
         ("9",  "digit:9", "num"), ("×", "operator:*", "op")],

        [("4",  "digit:4", "num"), ("5", "digit:5", "num"),
         ("6",  "digit:6", "num"), ("−", "operator:-", "op")],

        [("1",  "digit:1", "num"), ("2", "digit:2", "num"),
         ("3",  "digit:3", "num"), ("+", "operator:+", "op")],

        [("0",  "digit:0", "num"), (".", "decimal", "num"),
         ("=",  "equals",  "equals")],
    ]

    # ────────────────────────────────────────────────────────────

    def __init__(self, root: tk.Tk, engine: CalculatorEngine = None, ledger=None):
        self.root = root
        self.root.title("Calculadora")
        self.root.configure(bg=self.C["bg"])
        self.root.resizable(False, False)

        self.engine = engine if engine is not None else CalculatorEngine(ledger=ledger)
        self.ledger = ledger
        self._buttons: dict[str, tk.Button] = {}
        self._press_timers: dict[str, str] = {}
        self._history_empty = True

        self._init_fonts()
        self._create_display()
        self._create_keypad()
        self._create_history_panel()
        self._bind_keyboard()

        self.engine.add_listener(self.show_display)
        self.show_display(self.engine.display_state)
        if self.ledger is not None:
            self.ledger.add_listener(self.show_history)
            self.show_history(self.ledger.entries)

    # ── Fuentes ──────────────────────────────────────────────────

    def _init_fonts(self):
        self._f_expr    = tkfont.Font(family="Consolas", size=14)
        self._f_result  = tkfont.Font(family="Consolas", size=28, weight="bold")
        self._f_compact = tkfont.Font(family="Consolas", size=18, weight="bold")
        self._f_btn     = tkfont.Font(family="Segoe UI", size=15)
        self._f_small   = tkfont.Font(family="Segoe UI", size=11)

    # ── Pantalla ─────────────────────────────────────────────────

    def _create_display(self):
        frame = tk.Frame(self.root, bg=self.C["display_bg"], padx=12, pady=8)
        frame.grid(row=0, column=0, sticky="ew", padx=6, pady=(6, 2))

        self.expr_var = tk.StringVar()
        tk.Label(
            frame, textvariable=self.expr_var, font=self._f_expr,
            bg=self.C["display_bg"], fg=self.C["expr_fg"], anchor="e",
        ).pack(fill="x", pady=(4, 0))

        self.result_var = tk.StringVar(value="0")
        self.result_label = tk.Label(
            frame, textvariable=self.result_var, font=self._f_result,
            bg=self.C["display_bg"], fg=self.C["result_fg"], anchor="e",
        )
        self.result_label.pack(fill="x", pady=(2, 4))

    def show_display(self, state: DisplayState):
        self.expr_var.set(state.expression)
        self.result_var.set(state.operand)
        self.result_label.config(
            font=self._f_compact if state.compact else self._f_result
        )

    # ── Teclado ──────────────────────────────────────────────────

    def _create_keypad(self):
        frame = tk.Frame(self.root, bg=self.C["bg"])
        frame.grid(row=1, column=0, sticky="nsew", padx=6, pady=(2, 6))

        max_cols = max(len(row) for row in self.KEYPAD)
        for c in range(max_cols):
            frame.columnconfigure(c, weight=1, uniform="key")

        for r, row_def in enumerate(self.KEYPAD):
            spans = self._compute_spans(len(row_def), max_cols)
            col_pos = 0
            for idx, (text, command, kind) in enumerate(row_def):
                btn = tk.Button(
                    frame, text=text, font=self._f_btn, width=4,
                    bg=self.C[kind], fg=self.C[f"{kind}_fg"],
                    activebackground=self.C["special"], relief="flat",
                    command=lambda c=command: self._on_command(c),
                )
                btn.grid(row=r, column=col_pos, columnspan=spans[idx],
                         sticky="nsew", padx=2, pady=2, ipady=8)
                self._buttons[command] = btn
                col_pos += spans[idx]

        for r in range(len(self.KEYPAD)):
            frame.rowconfigure(r, weight=1)

    @staticmethod
    def _compute_spans(cols_in_row: int, max_cols: int) -> list[int]:
        """Reparte max_cols entre cols_in_row botones."""
        base, extra = divmod(max_cols, cols_in_row)
        spans = [base] * cols_in_row
        # Columnas sobrantes para el último botón ('=')
        spans[-1] += extra
        return spans

    # ── Historial ────────────────────────────────────────────────

    def _create_history_panel(self):
        frame = tk.Frame(self.root, bg=self.C["bg"])
        frame.grid(row=0, column=1, rowspan=2, sticky="nsew", padx=(0, 6), pady=6)

        tk.Label(
            frame, text="Historial", font=self._f_small,
            bg=self.C["bg"], fg=self.C["expr_fg"], anchor="w",
        ).pack(fill="x")

        self.history_list = tk.Listbox(
            frame, font=self._f_small, width=28, activestyle="none",
            bg=self.C["history_bg"], fg=self.C["history_fg"],
            selectbackground=self.C["special"], relief="flat",
            highlightthickness=0,
        )
        self.history_list.pack(fill="both", expand=True, pady=(4, 4))
        self.history_list.bind("<<ListboxSelect>>", self._on_history_select)

        tk.Button(
            frame, text="Borrar historial", font=self._f_small,
            bg=self.C["special"], fg=self.C["special_fg"],
            activebackground=self.C["num"], relief="flat",
            cursor="hand2", command=self._clear_history,
        ).pack(fill="x")

    def show_history(self, entries):
        self._history_empty = not entries
        self.history_list.delete(0, tk.END)
        if not entries:
            self.history_list.insert(tk.END, self.EMPTY_HISTORY_TEXT)
            self.history_list.itemconfig(0, fg=self.C["muted_fg"])
            return

        # Los Label/Listbox de Tk pintan texto plano: no hay marcado que escapar.
        for entry in entries:
            self.history_list.insert(
                tk.END,
                f"{entry.expression} = {format_display_value(entry.result)}",
            )

    def _on_history_select(self, _event):
        selection = self.history_list.curselection()
        if not selection or self._history_empty:
            return
        self.engine.load_history_entry(selection[0])
        self.history_list.selection_clear(0, tk.END)

    def _clear_history(self):
        if self.ledger is not None:
            self.ledger.clear()

    # ── Atajos de teclado ────────────────────────────────────────

    def _bind_keyboard(self):
        self.root.bind("<Key>", self._on_keypress)

    def _on_keypress(self, event):
        key = key_from_event(event.char, event.keysym)
        if key is None:
            return None
        action = action_for_key(key)
        if action is None:
            log.debug("Tecla ignorada: %r", key)
            return None

        self.engine.dispatch(action)
        command = action.kind if action.value is None else f"{action.kind}:{action.value}"
        self._animate_key(command)
        return "break"

    # ── Acciones ─────────────────────────────────────────────────

    def _on_command(self, command: str):
        self._animate_key(command)
        self.engine.dispatch(action_for_command(command))

    def _animate_key(self, command: str):
        btn = self._buttons.get(command)
        if btn is None:
            return

        pending = self._press_timers.pop(command, None)
        if pending is not None:
            self.root.after_cancel(pending)

        btn.config(relief="sunken", bg=self.C["pressed"])
        kind = self._kind_of(command)

        def _release():
            self._press_timers.pop(command, None)
            btn.config(relief="flat", bg=self.C[kind])

        self._press_timers[command] = self.root.after(self.PRESS_MS, _release)

    def _kind_of(self, command: str) -> str:
        for row_def in self.KEYPAD:
            for _text, cmd, kind in row_def:
                if cmd == command:
                    return kind
        return "num"
