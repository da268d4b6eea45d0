"""Logic for a set of group-chat bot plugins: parsing, storage, lookups and images."""

__version__ = "0.1.0"