"""Exception hierarchy for proberunner."""


class ProbeRunnerError(Exception):
    """Base class for all proberunner errors."""


class ConfigurationError(ProbeRunnerError, ValueError):
    """A run, preset or setting was rejected before any probe executed."""


class UnknownCategoryError(ConfigurationError):
    """The requested technique category is not registered."""

    def __init__(self, category_id: str):
        super().__init__(f"Unknown technique category: {category_id}")
        self.category_id = category_id


class InvalidTargetError(ConfigurationError):
    """The run target is not a parseable absolute URL."""


class InvalidURLError(ConfigurationError):
    """A preset URL is not a parseable absolute URL."""


class InvalidSettingsError(ConfigurationError):
    """A run setting is out of range."""


class AlreadyRunningError(ConfigurationError):
    """A run was started while another run is still active."""


class RunFailedError(ProbeRunnerError):
    """A run stopped because of a fault outside the probe path."""


class ExportError(ProbeRunnerError):
    """Serializing or persisting a report failed."""
