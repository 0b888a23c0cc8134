"""SheetRelay - forwards spreadsheet rows to a Google Apps Script webhook."""

__version__ = "0.1.0"
