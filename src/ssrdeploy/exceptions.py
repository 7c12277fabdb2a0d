from typing import Optional


class SSRDeployError(Exception):
    """Base exception for all application-specific errors."""

    pass


# --- 1. Errors related to loading and resolving configuration ---
class ConfigurationError(SSRDeployError):
    """Base class for errors encountered while finding, reading, or parsing config files."""

    pass


class ConfigFileMissingError(ConfigurationError):
    """Raised when the project configuration file cannot be found."""

    pass


class ConfigParsingError(ConfigurationError):
    """Raised when a YAML configuration file is syntactically incorrect."""

    pass


class ConfigValidationError(ConfigurationError):
    """Raised when the configuration fails structural validation (e.g., Pydantic)."""

    pass


class UnknownInputError(ConfigValidationError):
    """Raised when plugin inputs contain keys that have no default."""

    pass


# --- 2. Errors related to lifecycle ordering ---
class PreconditionError(SSRDeployError):
    """Base class for operations invoked without the state they depend on."""

    pass


class StageOrderError(PreconditionError):
    """Raised when a lifecycle stage is invoked before its predecessor completed."""

    def __init__(self, stage: str, state: str, expected: Optional[str] = None):
        self.stage = stage
        self.state = state
        self.expected = expected
        if expected:
            message = f"Stage '{stage}' requires state '{expected}', but plugin is '{state}'."
        else:
            message = f"Stage '{stage}' cannot run from state '{state}'."
        super().__init__(message)


# --- 3. Errors from external processes ---
class ProcessError(SSRDeployError):
    """Base class for failures of external install/build commands."""

    pass


class CommandFailedError(ProcessError):
    """Raised when an external command exits with a non-zero code."""

    def __init__(self, command: str, returncode: int, stderr: str = "", stage: Optional[str] = None):
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        self.stage = stage
        where = f" during '{stage}'" if stage else ""
        message = f"Command '{command}' exited with code {returncode}{where}."
        if stderr:
            message += f"\n{stderr}"
        super().__init__(message)


class CommandNotFoundError(ProcessError):
    """Raised when the shell used to run a command cannot be started."""

    pass


# --- 4. Errors in build output and packaging ---
class BuildOutputError(SSRDeployError):
    """Base class for build outputs that cannot be adapted for packaging."""

    pass


class EmptyBuildOutputError(BuildOutputError, IndexError):
    """Raised when the build output carries no function descriptors."""

    pass


class PackagingError(SSRDeployError):
    """Raised when a packaging configuration is rejected by the packager."""

    pass


class CollaboratorLoadError(ConfigurationError):
    """Raised when a builder or packager cannot be imported from its dotted path."""

    pass


class SSRBuildError(SSRDeployError):
    """Raised when the SSR project has no build output to turn into a function."""

    pass
