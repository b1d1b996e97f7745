#!/usr/bin/env python3
"""
Exception types for the Intercept Simulator.

None of these are fatal to a running session: SimulationClock turns rejected commands
into warning log entries, and ConfigurationError is only raised while building settings.
"""


class InterceptSimError(Exception):
    """Base class for simulator errors."""


class ConfigurationError(InterceptSimError, ValueError):
    """A setting is missing, out of range, or inconsistent with another setting."""


class InvalidCommandError(InterceptSimError, ValueError):
    """A command names an unknown value or carries an out-of-range argument."""
