"""
Error taxonomy for a harvest run.
Every failure is fatal; the CLI turns them into a non-zero exit code.
"""


class HarvestError(Exception):
    """Base class for all harvest failures."""


class BadDateFormat(HarvestError, ValueError):
    """A start/end date string could not be parsed."""


class RpcFailure(HarvestError):
    """Transport or decoding error talking to the node."""


class EncodeFailure(HarvestError):
    """The block encoder could not produce or write a record."""


class IoFailure(HarvestError, OSError):
    """Creating, writing or closing a blob file failed."""


class InvalidConfig(HarvestError, ValueError):
    """Options that cannot describe a valid run."""
