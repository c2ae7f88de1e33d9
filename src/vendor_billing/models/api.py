"""
API envelope models

The billing backend wraps every payload in
``{success, data, error_message, errors, pagination}``.
"""

from typing import Any, Dict, List, Optional, Union
from pydantic import AliasChoices, BaseModel, Field


class PaginationData(BaseModel):
    """Pagination metadata"""

    page: int = Field(default=1, description="Current page")
    page_size: int = Field(default=20, description="Items per page")
    total_count: int = Field(default=0, description="Total items")
    total_pages: int = Field(default=0, description="Total pages")


class FieldError(BaseModel):
    """Field-level validation error"""

    field: str
    message: str


class ApiResponse(BaseModel):
    """Standard API response envelope"""

    success: bool = Field(default=False, description="Request outcome")
    data: Optional[Any] = Field(None, description="Payload")
    pagination: Optional[PaginationData] = Field(
        None,
        validation_alias=AliasChoices("pagination", "pagination_data"),
        description="Pagination metadata for list endpoints",
    )
    error_message: Optional[str] = Field(None, description="Error summary")
    errors: Optional[Union[List[FieldError], List[str], Dict[str, str]]] = Field(
        None, description="Detailed errors"
    )
    message: Optional[str] = Field(None, description="Informational message")

    def get_error_message(self) -> str:
        """Extract a single human-readable error message"""
        if self.error_message:
            return self.error_message

        if isinstance(self.errors, list) and self.errors:
            if isinstance(self.errors[0], str):
                return ", ".join(self.errors)
            return ", ".join(f"{e.field}: {e.message}" for e in self.errors)

        if isinstance(self.errors, dict) and self.errors:
            return ", ".join(f"{k}: {v}" for k, v in self.errors.items())

        return "An unknown error occurred"
