"""Exception types shared across the collaborator package."""


class CollaboratorError(Exception):
    """Base class for collaborator errors."""


class ConfigurationError(CollaboratorError):
    """Raised when required configuration is missing or inconsistent."""


class CapabilityConfigError(ConfigurationError):
    """Raised when a capability is asked to run without the config it needs."""
