"""Service-layer exceptions."""


class BattleSetupError(Exception):
    """Raised when a battle cannot be created from the catalog."""


class SaveLoadError(Exception):
    """Raised when save or load operations fail."""
