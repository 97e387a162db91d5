"""Ayalon entity search skill.

Enriches a batch of documents with entity types, UMLS concepts,
relations and a resolved age, one result per input record.
"""

__version__ = "0.1.0"
