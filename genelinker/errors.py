# genelinker/errors.py


class UserInputError(ValueError):
    """Raised before any I/O when the caller hands us nothing usable."""


class DownloadError(RuntimeError):
    def __init__(self, message: str, missing_url: bool = False):
        super().__init__(message)
        self.missing_url = missing_url


class ExportError(RuntimeError):
    pass


def require_text(value, what: str = "query") -> str:
    s = str(value or "").strip()
    if not s:
        raise UserInputError(f"{what} required")
    return s
