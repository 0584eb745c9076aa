"""
Host management modules.
"""
from .ssh import SSHCommander, DryRunCommander, RemoteCommander

__all__ = [
    'SSHCommander',
    'DryRunCommander',
    'RemoteCommander',
]
