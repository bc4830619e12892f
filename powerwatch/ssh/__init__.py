"""
SSH module for powerwatch.

Provides the remote command channel used to shut down fleet hosts.
"""

from powerwatch.ssh.client import SSHClient, SSHCommandResult, SSHConnectionConfig

__all__ = ["SSHClient", "SSHCommandResult", "SSHConnectionConfig"]
