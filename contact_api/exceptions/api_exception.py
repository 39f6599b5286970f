from typing import Any

from fastapi import HTTPException


class APIException(HTTPException):
    status_code: int
    detail: str
    description: str

    def __init__(self, headers: dict[str, str] | None = None, **extra: Any) -> None:
        super().__init__(self.status_code, self.detail, headers)
        self.extra = extra

    @property
    def body(self) -> dict[str, Any]:
        return {"success": False, "error": self.detail, **self.extra}
