class NarrationError(Exception):
    """Playback could not be produced by a given path."""


class RemoteError(NarrationError):
    pass


class RemoteTimeout(RemoteError):
    """The text-to-speech function did not answer within the configured timeout."""
