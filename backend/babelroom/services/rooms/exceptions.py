"""
Room Exceptions
"""


class RoomError(Exception):
    """Base exception for room errors"""
    pass


class RoomNotFoundError(RoomError):
    """Raised when a room does not exist (or no longer has members)"""
    pass


class NotInRoomError(RoomError):
    """Raised when a connection acts on a room it has not joined"""
    pass


class RoomIdUnavailableError(RoomError):
    """Raised when no unused room code could be generated"""
    pass
