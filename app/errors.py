"""Domain errors for the view cache and analysis metadata cores."""


class CacheStoreUnavailable(Exception):
    """Cache store could not be reached; the job framework retries."""

    def __init__(self, message: str = "Cache store unavailable"):
        self.message = message
        super().__init__(self.message)


class ExternalFetchFailure(Exception):
    """A FireCloud submission, configuration or workflow fetch failed."""

    def __init__(self, message: str = "External fetch failed", resource: str | None = None):
        self.message = message
        self.resource = resource
        super().__init__(self.message)


class UnknownSchemaVersion(ValueError):
    """No schema or field mapping registered for a version."""

    def __init__(self, version: str):
        self.version = version
        self.message = f"Unknown analysis schema version: {version}"
        super().__init__(self.message)


class PayloadAssemblyError(Exception):
    """A payload property could not be computed."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class SchemaValidationFailure(Exception):
    """Record rejected at creation; errors are keyed by field name."""

    def __init__(self, errors: dict[str, list[str]]):
        self.errors = errors
        self.message = "; ".join(f"{field} {', '.join(msgs)}" for field, msgs in errors.items())
        super().__init__(self.message)
