class PeerlinkError(Exception):
    pass


class SetupError(PeerlinkError):
    """Connection or terminal setup failed before the session started."""
