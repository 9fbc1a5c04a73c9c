"""
toolprep — workstation prerequisite planner, module updater and
deployment-package scaffolder.
"""

__version__ = "0.1.0"
