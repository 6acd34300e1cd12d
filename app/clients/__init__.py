from .google_sheets import GoogleSheetsClient

__all__ = ["GoogleSheetsClient"]
