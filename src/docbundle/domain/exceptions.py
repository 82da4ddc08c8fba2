"""Domain exceptions."""


class DocBundleError(Exception):
    """Base exception for docbundle."""

    pass


class ValidationError(DocBundleError):
    """Validation failed for input data."""

    pass


class NotFound(DocBundleError):
    """Requested resource was not found."""

    def __init__(self, kind: str, identifier: str) -> None:
        super().__init__(f"{kind} not found: {identifier}")
        self.kind = kind
        self.identifier = identifier


class PresetNotFound(NotFound):
    """No preset is configured under the requested key."""

    def __init__(self, preset_key: str) -> None:
        super().__init__("Preset", preset_key)
        self.preset_key = preset_key


class InvalidVersionTag(ValidationError):
    """Version tag is neither "latest" nor a YYYY-MM-DD date."""

    pass


class NoContentForPreset(DocBundleError):
    """Materializing a preset produced no documents."""

    def __init__(self, preset_key: str) -> None:
        super().__init__(f"No content found for preset {preset_key}")
        self.preset_key = preset_key


class IngestionError(DocBundleError):
    """Fetching or unpacking a source archive failed."""

    pass


class SourceUnavailable(IngestionError):
    """Repository host unreachable or answered with a non-success status."""

    pass


class ArchiveCorrupt(IngestionError):
    """Decompression or archive extraction failed partway."""

    pass


class StoreUnavailable(DocBundleError):
    """Persistence layer could not be reached."""

    pass


class ReconciliationAborted(DocBundleError):
    """A reconcile run stopped early; carries the counts applied so far."""

    def __init__(self, message: str, result: object) -> None:
        super().__init__(message)
        self.result = result


class ProviderError(DocBundleError):
    """Base for batch inference provider failures."""

    pass


class ProviderUnavailable(ProviderError):
    """Provider could not be reached or kept failing transiently."""

    pass


class BatchTimeout(ProviderUnavailable):
    """Batch did not finish within the configured maximum wait."""

    pass


class ProviderRejected(ProviderError):
    """Provider refused the request or reported the batch as failed."""

    pass


class InvalidJobTransition(DocBundleError):
    """Distillation job state change would break its invariants."""

    pass
