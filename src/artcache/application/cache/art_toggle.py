"""Process-wide art on/off switch."""


class ArtToggle:
    """Shared enabled flag for every ArtService in the process.

    Hey future me - ArtService lives for ONE request, so the flag can't live on it.
    lifespan() creates one ArtToggle and every per-request service writes through it.
    """

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled

    def set(self, value: bool | None = None) -> bool:
        """Set the flag; None flips it. Returns the new state."""
        self.enabled = (not self.enabled) if value is None else bool(value)
        return self.enabled
