"""HR assistant document intelligence and retrieval pipeline."""

__version__ = "0.1.0"
__app_name__ = "HR-Assistant"
