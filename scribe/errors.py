"""Exceptions raised by the Scribe persistence engine."""


class StudioError(Exception):
    """Base class for all engine errors. The message is user-presentable."""


class DuplicateEmail(StudioError):
    def __init__(self, email: str):
        super().__init__("This email address is already registered.")
        self.email = email


class InvalidCredentials(StudioError):
    def __init__(self):
        super().__init__("Email or password is incorrect.")


class MalformedBackup(StudioError):
    """Backup text could not be parsed into the expected document shape."""


class MissingProviderCredential(StudioError):
    """The model provider has no API key configured."""

    def __init__(self, variable: str = "ANTHROPIC_API_KEY"):
        super().__init__(f"Model provider key is missing. Set {variable} in the environment.")
        self.variable = variable
