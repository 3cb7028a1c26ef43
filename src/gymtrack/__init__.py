"""gymtrack: resistance-training load tracker."""

__version__ = "0.1.0"
