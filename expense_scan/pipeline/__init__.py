"""
Scan orchestration.
"""

from .scan_session import ReceiptScanSession, ScanInProgressError, ScanState

__all__ = ["ReceiptScanSession", "ScanInProgressError", "ScanState"]
