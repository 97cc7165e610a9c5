class HhandError(Exception):
    """Base class for failures raised by the external collaborators."""


class BookmarkImportError(HhandError):
    pass


class LocateError(HhandError):
    pass


class ClipboardError(HhandError):
    pass


class LaunchError(HhandError):
    pass


class ConfigError(HhandError):
    pass
