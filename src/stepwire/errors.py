__all__ = ["InjectionError", "ConfigurationError", "InvalidFieldError"]


class InjectionError(Exception):
    """Base class for errors raised while wiring step libraries into a test case."""

    pass


class ConfigurationError(InjectionError):
    """Raised when injection is misconfigured: no marked field where one is
    required, a creation cycle between step libraries, or invalid settings."""

    pass


class InvalidFieldError(InjectionError):
    """Raised when a marked field cannot be read, written or instantiated."""

    def __init__(self, message: str, field_name: str = None, owner: type = None):
        super().__init__(message)
        self.field_name = field_name
        self.owner = owner
