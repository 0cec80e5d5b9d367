from .csv_backend import CsvInventoryStore, TABLE_COLUMNS, resolve_data_dir

__all__ = ["CsvInventoryStore", "TABLE_COLUMNS", "resolve_data_dir"]
