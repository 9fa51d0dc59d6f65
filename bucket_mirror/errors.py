class MirrorError(Exception):
    """Base class for everything the mirror raises on purpose."""


class ConfigError(MirrorError):
    pass


class ListError(MirrorError):
    """A listing page could not be fetched; the current cycle is over."""

    def __init__(self, cause: Exception):
        super().__init__(f"listing failed: {cause}")
        self.cause = cause


class RootError(MirrorError):
    def __init__(self, path: str, cause: Exception):
        super().__init__(f"could not create local root {path}: {cause}")
        self.path = path
        self.cause = cause


class DirectoryError(MirrorError):
    def __init__(self, path: str, cause: Exception):
        super().__init__(f"could not create directory {path}: {cause}")
        self.path = path
        self.cause = cause


class UnsafeKeyError(MirrorError):
    def __init__(self, key: str):
        super().__init__(f"key resolves outside the local root: {key!r}")
        self.key = key


class TransferError(MirrorError):
    def __init__(self, key: str, cause: Exception):
        super().__init__(f"transfer of {key} failed: {cause}")
        self.key = key
        self.cause = cause
