"""Punto de entrada de la calculadora de escritorio."""

import logging
import os
import tkinter as tk
from logging.handlers import RotatingFileHandler
from pathlib import Path

from arithmetic import FloatArithmetic
from calculator_engine import CalculatorEngine
from calculator_ui import CalculatorApp
from history_ledger import HistoryLedger
from key_value_store import JsonFileStore


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


USE_ARBITRARY_PRECISION = _env_flag("CALC_ARBITRARY_PRECISION", False)
AP_WORKING_DIGITS = 120
HISTORY_FILE = Path(
    os.getenv("CALC_HISTORY_FILE", Path.home() / ".calculadora" / "history.json")
)
LOG_LEVEL = os.getenv("CALC_LOG_LEVEL", "INFO").upper()


# ── Registro ─────────────────────────────────────────────────────

def _setup_logging():
    level = getattr(logging, LOG_LEVEL, logging.INFO)

    logger = logging.getLogger("calculadora")
    logger.setLevel(level)

    if logger.handlers:
        return logger  # ya configurado

    fmt = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    sh = logging.StreamHandler()
    sh.setLevel(level)
    sh.setFormatter(fmt)
    logger.addHandler(sh)

    try:
        HISTORY_FILE.parent.mkdir(parents=True, exist_ok=True)
        fh = RotatingFileHandler(
            HISTORY_FILE.parent / "calculadora.log",
            maxBytes=512_000, backupCount=2, encoding="utf-8",
        )
    except OSError:
        logger.warning("Sin registro en archivo: %s no es escribible",
                       HISTORY_FILE.parent)
    else:
        fh.setLevel(level)
        fh.setFormatter(fmt)
        logger.addHandler(fh)

    return logger


def _build_arithmetic():
    if USE_ARBITRARY_PRECISION:
        from arbitrary_precision_arithmetic import MPMathArithmetic

        return MPMathArithmetic(working_digits=AP_WORKING_DIGITS)
    return FloatArithmetic()


def main():
    log = _setup_logging()

    ledger = HistoryLedger(JsonFileStore(HISTORY_FILE))
    ledger.load_from_storage()
    engine = CalculatorEngine(ledger=ledger, arithmetic=_build_arithmetic())
    log.info("Historial en %s (%d entradas)", HISTORY_FILE, len(ledger))

    root = tk.Tk()
    root.minsize(560, 440)
    CalculatorApp(root, engine=engine, ledger=ledger)
    root.mainloop()


if __name__ == "__main__":
    main()
