"""Endpoint modules. Internal to pysensi."""
