"""
powerwatch - network reachability watchdog for UPS-backed hosts.

Shuts down a fleet of remote machines, then the local one, after the
upstream network has been unreachable for a sustained period.
"""

__version__ = "0.1.0"
