"""roi_tracker: rank sales tasks by return on time spent."""

__version__ = "0.1.0"
