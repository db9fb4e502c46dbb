"""Domain-specific exceptions for the fixture server and its harness."""


class FixtureServerError(Exception):
    """Base exception for all fixture server errors."""

    pass


class ConfigError(FixtureServerError):
    """Raised when a server is constructed with an invalid route table or port."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(f"Invalid fixture configuration: {message}")


class BindError(FixtureServerError):
    """Raised when the listening socket cannot be bound."""

    def __init__(self, host: str, port: int, reason: str):
        self.host = host
        self.port = port
        self.reason = reason
        super().__init__(f"Cannot bind fixture server to {host}:{port}: {reason}")


class HandlerError(FixtureServerError):
    """Raised when a route handler produces an unusable response."""

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"Handler for {path} failed: {message}")


class RemoteConnectionError(FixtureServerError):
    """Raised when unable to reach the remote WebDriver endpoint."""

    def __init__(self, remote_url: str, message: str):
        self.remote_url = remote_url
        super().__init__(f"Failed to connect to remote WebDriver at {remote_url}: {message}")


class WaitTimeoutError(FixtureServerError):
    """Raised when a wait condition times out."""

    def __init__(self, condition: str, timeout_seconds: float):
        self.condition = condition
        self.timeout_seconds = timeout_seconds
        super().__init__(f"Timeout ({timeout_seconds}s) waiting for: {condition}")
