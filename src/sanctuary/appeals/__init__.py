"""Appeal subsystem."""

from sanctuary.appeals.book import AppealBook

__all__ = ["AppealBook"]
