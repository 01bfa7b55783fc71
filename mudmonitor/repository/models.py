from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class Endpoint:
    """A registered game server and the address its status is read from."""

    server_id: str
    host: str
    port: int
