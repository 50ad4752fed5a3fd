"""RocketCart: stock-checked shopping cart with persisted snapshots."""

__version__ = "0.1.0"
