"""SalesNet: sales network commission tracker."""

__version__ = "1.0.0"
