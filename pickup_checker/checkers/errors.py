class CheckError(Exception):
    """Base class for failures that end a poll cycle early."""


class NetworkError(CheckError):
    def __init__(self, url: str, cause: BaseException | None = None) -> None:
        self.url = url
        self.cause = cause
        super().__init__(f"request to {url} failed: {cause!r}")


class DecodeError(CheckError):
    def __init__(self, excerpt: str, cause: BaseException | str | None = None) -> None:
        self.excerpt = excerpt
        self.cause = cause
        super().__init__(f"could not decode search response ({cause}): {excerpt!r}")
