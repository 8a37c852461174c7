"""Errors that end a cycle before anything is persisted or published."""


class FatalCycleError(Exception):
    """Base for conditions that abort the current cycle only."""


class RecordExtractionError(FatalCycleError):
    """The feed body does not hold a usable observation row."""


class TimestampParseError(FatalCycleError):
    """The observation time could not be parsed or localized."""


class MissingWaterTemperatureError(FatalCycleError):
    """Water temperature is unparsable and there is no prior observation."""


class MissingTideError(FatalCycleError):
    """No tide prediction at or after the current time."""


class InvalidTideFlagError(FatalCycleError, ValueError):
    """A tide prediction carries a high/low flag other than H or L."""

    def __init__(self, flag: str):
        super().__init__(f"Unrecognized tide high/low flag: {flag!r}")
        self.flag = flag
