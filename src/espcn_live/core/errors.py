"""Exception types for espcn-live."""


class EspcnLiveError(Exception):
    """Base class for all espcn-live errors."""


class SourceError(EspcnLiveError):
    """A frame source could not be opened or read."""


class InferenceError(EspcnLiveError):
    """The inference runtime failed to load a model or run it."""


class AdapterNotLoadedError(InferenceError):
    """``infer`` was called before the adapter's model was loaded."""
