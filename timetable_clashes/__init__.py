"""Course catalog, clash detection and section search for colour-coded timetable grids."""

__version__ = "0.1.0"
