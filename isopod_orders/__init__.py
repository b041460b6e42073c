"""Order dashboard backend for a live-animal and terrarium-supply shop."""

__version__ = "1.0.0"
