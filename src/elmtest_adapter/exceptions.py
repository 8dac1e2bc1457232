# src/elmtest_adapter/exceptions.py

"""
Exception hierarchy for elmtest-adapter.
"""


class AdapterError(Exception):
    """Base class for all elmtest-adapter errors."""

    pass


class ConfigurationError(AdapterError):
    """Raised when the configuration file is missing values or cannot be parsed."""

    def __init__(self, message: str, path: str | None = None, details: Exception | None = None):
        self.path = path
        self.details = details
        full_message = message
        if path:
            full_message += f" (Config: '{path}')"
        super().__init__(full_message)
        if details:
            self.add_note(f"Original error: {type(details).__name__}: {details}")


class ProtocolError(AdapterError):
    """
    Raised when elm-test emits a JSON event this adapter does not understand.

    An unknown ``event``, ``status`` or failure shape means the tool and the
    adapter disagree on the report format, so it is never downgraded to a
    plain message.
    """

    pass


class DuplicateTestIdError(AdapterError):
    """Raised when the same full label path is reported twice in one run."""

    def __init__(self, test_id: str):
        self.test_id = test_id
        super().__init__(f"duplicate id '{test_id}'")


class RunnerError(AdapterError):
    """Base class for errors raised by the run orchestrator."""

    pass


class ProcessStartError(RunnerError):
    """Raised when the elm-test executable cannot be started."""

    def __init__(self, executable: str, details: Exception | None = None):
        self.executable = executable
        super().__init__(f"Cannot start '{executable}'")
        if details:
            self.add_note(f"Original error: {type(details).__name__}: {details}")


class AlreadyRunningError(RunnerError):
    """Raised when a run is requested while another one is still outstanding."""

    def __init__(self, project: str | None = None):
        self.project = project
        message = "already running"
        if project:
            message += f" (Project: '{project}')"
        super().__init__(message)


# 🔼⚙️
