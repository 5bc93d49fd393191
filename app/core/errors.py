class NotFoundError(LookupError):
    pass


class StatusConflictError(ValueError):
    """Status action that is redundant, not allowed for the booking category, or based on a stale version."""


class InsufficientStockError(ValueError):
    pass


class ServiceNotConfigured(RuntimeError):
    def __init__(self, service: str, variables: list[str]):
        self.service = service
        self.variables = variables
        super().__init__(f"{service} is not configured (missing {', '.join(variables)})")
