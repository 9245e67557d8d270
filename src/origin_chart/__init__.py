"""origin-chart: layout and connectivity for step-based origin path charts."""

__version__ = "0.1.0"
