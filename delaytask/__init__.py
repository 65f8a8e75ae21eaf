"""
Distributed Delay-Task Queue

Schedules opaque payloads for delivery at a future tick and hands due payloads
to consumers exactly once per tick window, coordinated entirely through
atomic Redis scripts.
"""

__version__ = "1.0.0"
