class LevelNotFound(LookupError):
    """Raised when a level id is absent from the catalog."""

    def __init__(self, level_id):
        super().__init__(f"Level {level_id} not found")
        self.level_id = level_id


class LevelDataError(ValueError):
    """Raised when hand-authored level data is malformed."""
