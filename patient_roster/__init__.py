"""Identity resolution for migrating per-site clinic patient rosters."""

__version__ = "0.1.0"
