# pingfeed/errors.py


class PingfeedError(RuntimeError):
    """Base class for every error pingfeed raises on purpose."""


class ConfigError(PingfeedError):
    def __init__(self, message: str, *, path=None):
        super().__init__(message)
        self.path = path


class FPingError(PingfeedError):
    """Startup faults of the fping process (fatal for the run)."""


class FPingNotFoundError(FPingError):
    pass


class FPingStartError(FPingError):
    pass


class SinkSetupError(PingfeedError):
    pass


class SinkWriteError(PingfeedError):
    """A single record could not be written. The run carries on."""


class LineFormatError(PingfeedError):
    """Raised when a line of fping output cannot be interpreted.

    The offending text is kept verbatim on ``line`` for diagnosis.
    """

    def __init__(self, message: str, line: str):
        super().__init__(message)
        self.line = line


class TimestampFormatError(LineFormatError):
    pass


class UnrecognizedLineError(LineFormatError):
    pass
