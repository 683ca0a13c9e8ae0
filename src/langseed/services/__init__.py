"""Services composing generators into batch workflows."""

from langseed.services.word_importer import ImportReport, WordImporter

__all__ = ["ImportReport", "WordImporter"]
