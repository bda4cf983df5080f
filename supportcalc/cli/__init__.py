"""Support Calc command-line interface."""
