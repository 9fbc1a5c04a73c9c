"""
Adapters — the only code that touches the outside world.

``probe`` answers read-only questions about the workstation; the
registry and its adapters perform remediation and update commands.
"""
