"""Domain-specific exceptions: framework-independent."""


class EntityNotFoundError(Exception):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity_type: str, entity_id: int | str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with id '{entity_id}' not found")


class DuplicateEntityError(Exception):
    """Raised when attempting to create a duplicate entity."""

    def __init__(self, entity_type: str, field: str, value: str):
        self.entity_type = entity_type
        self.field = field
        self.value = value
        super().__init__(f"{entity_type} with {field}='{value}' already exists")


class ValidationError(Exception):
    """Raised when user-supplied input violates a domain rule."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(message)


class VPSNotConnectedError(Exception):
    """Raised when a server operation is attempted without an active connection."""

    def __init__(self) -> None:
        super().__init__("Not connected to VPS")


class CommandExecutionError(Exception):
    """Raised when a shell command exits non-zero or cannot be started."""

    def __init__(self, command: str, exit_code: int, stderr: str = ""):
        self.command = command
        self.exit_code = exit_code
        self.stderr = stderr
        detail = stderr.strip().splitlines()[-1] if stderr.strip() else "no output"
        super().__init__(f"Command '{command}' failed with exit code {exit_code}: {detail}")


class InstallerError(Exception):
    """Raised when a step of an installation pipeline fails."""

    def __init__(self, step: str, message: str):
        self.step = step
        self.message = message
        super().__init__(message)


class InstallationInProgressError(Exception):
    """Raised when a server setup is requested while another one is running."""

    def __init__(self) -> None:
        super().__init__("Installation already in progress")
