"""Support Calc - Child support guidelines worksheet calculator."""

__version__ = "0.1.0"
