"""
Durable record of exported documents.
"""

from .ledger import DEFAULT_LEDGER_FILE, ExportLedger

__all__ = ["DEFAULT_LEDGER_FILE", "ExportLedger"]
