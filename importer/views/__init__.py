from .import_csv import ImportCSVView

__all__ = ["ImportCSVView"]
