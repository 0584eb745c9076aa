"""
Remote command execution over SSH using paramiko.
"""
import logging
import os
import socket
from typing import Optional, Protocol

import paramiko
from paramiko.ssh_exception import (
    AuthenticationException,
    NoValidConnectionsError,
    SSHException,
)

from atomicctl.modules.provision.errors import CommandError

logger = logging.getLogger("atomicctl.ssh")


class RemoteCommander(Protocol):
    """Runs a single command on the remote host and returns its output.

    Implementations raise CommandError when the command exits non-zero or the
    transport fails. Calls block until the command completes.
    """

    def run(self, command: str) -> str:
        ...


class SSHCommander:
    """SSH command runner backed by a single paramiko client."""

    def __init__(self, host: str, username: str, key_path: str = None, port: int = 22, timeout: int = 30):
        """Initialize the commander.

        Args:
            host: Remote host to connect to
            username: Username for authentication
            key_path: Path to SSH private key (optional)
            port: SSH port (default: 22)
            timeout: Connection timeout in seconds (default: 30)
        """
        self.host = host
        self.username = username
        self.key_path = os.path.expanduser(key_path) if key_path else None
        self.port = port
        self.timeout = timeout
        self._client: Optional[paramiko.SSHClient] = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def _connect(self) -> paramiko.SSHClient:
        """Open the SSH connection on first use."""
        if self._client is not None:
            transport = self._client.get_transport()
            if transport is not None and transport.is_active():
                return self._client
            self.close()

        client = paramiko.SSHClient()
        client.set_missing_host_key_policy(paramiko.AutoAddPolicy())
        logger.debug(f"Connecting to {self.username}@{self.host}:{self.port}")
        client.connect(
            hostname=self.host,
            port=self.port,
            username=self.username,
            key_filename=self.key_path,
            timeout=self.timeout,
            allow_agent=self.key_path is None,
            look_for_keys=self.key_path is None,
        )
        self._client = client
        return client

    def run(self, command: str) -> str:
        """Execute a command and return its combined stdout/stderr.

        Raises:
            CommandError: If the command exits non-zero (exit_status is set) or
                the connection fails (exit_status is None)
        """
        logger.debug(f"[{self.host}] Executing: {command}")
        try:
            client = self._connect()
            channel = client.get_transport().open_session(timeout=self.timeout)
            channel.set_combine_stderr(True)
            channel.exec_command(command)
            with channel.makefile('rb') as stdout:
                output = stdout.read().decode('utf-8', 'replace')
            exit_status = channel.recv_exit_status()
            channel.close()
        except (AuthenticationException, NoValidConnectionsError, SSHException, socket.error) as e:
            logger.debug(f"[{self.host}] Transport error running '{command}': {e}")
            raise CommandError(command, exit_status=None, reason=str(e)) from e

        logger.debug(f"[{self.host}] Exit status {exit_status}\nOutput:\n{output}")
        if exit_status != 0:
            raise CommandError(command, exit_status=exit_status, output=output)
        return output

    def close(self) -> None:
        """Close the SSH connection."""
        if self._client is not None:
            self._client.close()
            self._client = None


class DryRunCommander:
    """Logs commands instead of executing them."""

    def __init__(self, host: str = "dry-run"):
        self.host = host
        self.commands = []

    def run(self, command: str) -> str:
        logger.info("[DRY RUN] Would execute on %s: %s", self.host, command)
        self.commands.append(command)
        return ""
