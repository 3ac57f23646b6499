"""State/store layer.

This package is the single owner of the merged thermostat snapshot and the
only place change events are derived from incoming hub messages.
"""
