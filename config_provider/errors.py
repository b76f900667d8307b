class ConfigProviderError(Exception):
    """Base class for every error raised by the config provider."""


class TemplateError(ConfigProviderError):
    """A coordinate template failed to parse or referenced an unknown field."""

    def __init__(self, template: str, message: str):
        self.template = template
        super().__init__(f"template {template!r}: {message}")


class UnsupportedBackendError(ConfigProviderError):
    def __init__(self, server_type: str):
        self.server_type = server_type
        super().__init__(f"unsupported server type: {server_type}")


class FetchError(ConfigProviderError):
    """The backend could not be reached or did not return what was asked for."""


class DirectoryNotFoundError(FetchError):
    pass


class BackendAuthError(FetchError):
    pass


class DecodeError(ConfigProviderError):
    """File content came back but could not be turned into text."""
