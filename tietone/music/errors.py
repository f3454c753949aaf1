class NotationError(ValueError):
    """Base class for recoverable notation problems."""


class UnknownNoteName(NotationError):
    def __init__(self, note_name: str) -> None:
        super().__init__(f"Invalid note name: {note_name!r}")
        self.note_name = note_name


class InvalidDurationFormat(NotationError):
    def __init__(self, token: str) -> None:
        super().__init__(f"Invalid note duration format: {token!r}")
        self.token = token


class InvalidEventSpec(NotationError):
    def __init__(self, fields: object, expected: int) -> None:
        super().__init__(f"Invalid note entry {fields!r}: expected at least {expected} fields")
        self.fields = fields
        self.expected = expected


class EmptyChord(NotationError):
    def __init__(self) -> None:
        super().__init__("A chord needs at least one note.")
