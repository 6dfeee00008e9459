# app/domain/exceptions.py


class DomainError(Exception):
    """Bazowy wyjatek domeny koszyka i zamowien."""

    code = "DOMAIN_ERROR"

    def __init__(self, message: str, code: str | None = None):
        self.message = message
        self.code = code or self.code
        super().__init__(message)


class ValidationError(DomainError):
    code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class NotFoundError(DomainError):
    """Encja nie istnieje albo nie nalezy do uzytkownika."""

    code = "NOT_FOUND"

    def __init__(self, entity: str, entity_id):
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class ConflictError(DomainError):
    code = "CONFLICT"


class StorageError(DomainError):
    """Blad bazy lub transakcji, transakcja jest zawsze wycofana."""

    code = "STORAGE_ERROR"


class ServiceUnavailableError(StorageError):
    code = "SERVICE_UNAVAILABLE"
