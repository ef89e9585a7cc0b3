class ChartError(Exception):
    """Base class for errors raised by the chart pipeline and its owning layer."""


class DatasetValidationError(ChartError):
    """The dataset is structurally invalid and was rejected at load time."""


class EmptyVisibilitySetError(ChartError):
    """The operation would leave no variation visible."""


class InvalidZoomLevelError(ChartError):
    """The zoom level is not usable (non-positive, or outside the allowed steps)."""


class UnknownVariationError(ChartError):
    """A variation name does not belong to the dataset."""


class SessionNotFoundError(ChartError):
    """No chart session is stored under the given id."""
