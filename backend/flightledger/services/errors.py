"""Error kinds surfaced by the booking ledger and the persistence store.

Every expected business condition is one of these; the API maps them to
HTTP responses in one place (see ``flightledger.main``).
"""


class LedgerError(Exception):
    kind = "ledger_error"
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"detail": self.message, "error": self.kind}


class NotFoundError(LedgerError):
    kind = "not_found"
    status_code = 404

    def __init__(self, entity: str, key=None):
        message = f"{entity} not found" if key is None else f"{entity} {key} not found"
        super().__init__(message)
        self.entity = entity
        self.key = key


class AvailabilityError(LedgerError):
    kind = "no_availability"
    status_code = 409


class DuplicateIdentifierError(LedgerError):
    kind = "duplicate_identifier"
    status_code = 409

    def __init__(self, family: str, value: str):
        super().__init__(f"{family} '{value}' is already in use")
        self.family = family
        self.value = value


class ValidationError(LedgerError):
    kind = "validation_error"
    status_code = 422

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["field"] = self.field
        return data


class InvalidStatusTransitionError(LedgerError):
    kind = "invalid_status_transition"
    status_code = 409


class FlightInUseError(LedgerError):
    kind = "flight_in_use"
    status_code = 409


class StorageError(LedgerError):
    kind = "storage_error"
    status_code = 503
