class VersionConflictError(Exception):
    """A guarded write matched no row: the record changed since it was read."""

    def __init__(self, entity: str, key: object):
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} {key} was modified concurrently")


class DuplicateKeyError(Exception):
    """An insert collided with a record that already holds the key."""

    def __init__(self, entity: str, key: object):
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} {key} already exists")
