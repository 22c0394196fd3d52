class CastwayException(Exception):
    """Base exception for castway."""

    message: str

    def __init__(self, message: str | None = None, *args):
        super().__init__(message, *args)
        if message is not None:
            self.message = message
        elif args and args[0]:
            self.message = str(args[0])
        else:
            self.message = self.__class__.__name__


class InjectionError(CastwayException):
    """Raised when the object factory cannot supply a dependency while building a handler."""

    def __init__(self, message: str, target: type, dependency: object = None):
        super().__init__(message)
        self.target = target
        self.dependency = dependency


class RemapError(CastwayException):
    """Raised by a remapping strategy that could not rewrite a registration."""

    def __init__(self, message: str, route: str, path: str):
        super().__init__(message)
        self.route = route
        self.path = path


class ChannelClosedError(CastwayException):
    """Raised when subscribing to a channel that has been removed from its registry."""

    def __init__(self, channel_id: str):
        super().__init__(f"Channel {channel_id!r} is closed")
        self.channel_id = channel_id


class PathInfoUnavailable(CastwayException):
    """Raised by a request whose transport cannot supply path info."""
