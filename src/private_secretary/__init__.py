# src/private_secretary/__init__.py

"""Personal task calendar with a one-way TickTick sync bridge."""

MODULE_NAME = "private-secretary"

__version__ = "0.1.0"
