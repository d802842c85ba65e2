class ExportError(Exception):
    """Base class for every failure the export can report."""


class ConfigurationError(ExportError):
    pass


class MissingSettingError(ConfigurationError):
    def __init__(self, name):
        self.name = name
        super().__init__(f"missing required configuration: {name}")


class StoreConnectionError(ExportError):
    """The DynamoDB client could not be built for the given profile."""


class ScanError(ExportError):
    """A scan page request failed.

    ``partial`` holds the items collected before the failing page.
    """

    def __init__(self, message, partial=None):
        super().__init__(message)
        self.partial = list(partial or [])


class WriteError(ExportError):
    pass
