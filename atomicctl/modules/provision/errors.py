"""Exception types raised while provisioning an Atomic Host."""

from typing import Optional


class ProvisionError(Exception):
    """Base class for all provisioning failures."""
    pass


class ValidationError(ProvisionError):
    """Raised when options are rejected before anything touches the host."""
    pass


class CommandError(ProvisionError):
    """Raised when a remote command fails.

    Attributes:
        command: The command that was run on the remote host
        exit_status: Remote exit status, or None if the transport itself failed
        output: Combined stdout/stderr captured from the command
    """

    def __init__(self, command: str, exit_status: Optional[int] = None, output: str = "", reason: str = ""):
        self.command = command
        self.exit_status = exit_status
        self.output = output
        self.reason = reason
        super().__init__(self._format())

    def _format(self) -> str:
        if self.exit_status is None:
            return f"Command '{self.command}' failed: {self.reason or 'transport error'}"
        return f"Command '{self.command}' failed with exit status {self.exit_status}"


class RenderError(ProvisionError):
    """Raised when the engine unit template cannot be rendered."""
    pass


class RegistryError(ProvisionError):
    """Raised for unknown or duplicate provisioner registrations."""
    pass
