"""Internal constants shared across the library."""

BASE_URL = "http://localhost:8080"
WS_URL = "ws://localhost:5002"
USER_AGENT = "pysmarthome"

#: Marker that turns the color channel into a command channel.
COMMAND_PREFIX = "CMD:"

#: Room label used to group devices that carry no room.
UNASSIGNED_ROOM = "unassigned"
