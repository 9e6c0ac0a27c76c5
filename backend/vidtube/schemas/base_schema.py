from typing import Any

from pydantic import BaseModel, model_validator


class ApiResponse(BaseModel):
    """Envelope for every successful response"""
    statusCode: int
    data: Any = None
    message: str = "Success"
    success: bool = True

    @model_validator(mode="after")
    def _derive_success(self):
        self.success = self.statusCode < 400
        return self

