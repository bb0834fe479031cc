"""Size-based sync verification through portable directory snapshots."""

__version__ = "0.1.0"
