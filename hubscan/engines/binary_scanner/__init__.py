"""Binary scanner engine — inventory managed and native dependencies of an artifact."""

from hubscan.engines.binary_scanner.blacklist import Blacklist
from hubscan.engines.binary_scanner.report import InventoryReport, ScanDocument
from hubscan.engines.binary_scanner.scanner import DependencyGraphScanner, scan

__all__ = ["Blacklist", "DependencyGraphScanner", "InventoryReport", "ScanDocument", "scan"]
