"""Common models and enums used across docfill."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ParameterType(str, Enum):
    """Input types a template parameter can declare."""

    TEXT = "text"
    NUMBER = "number"
    EMAIL = "email"
    DATE = "date"
    TEXTAREA = "textarea"


class DocumentFormat(str, Enum):
    """Office document family of a template."""

    WORD = "word"
    EXCEL = "excel"


FILE_TYPE_FORMATS = {
    "docx": DocumentFormat.WORD,
    "doc": DocumentFormat.WORD,
    "xlsx": DocumentFormat.EXCEL,
    "xls": DocumentFormat.EXCEL,
}

CONTENT_TYPES = {
    DocumentFormat.WORD: "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    DocumentFormat.EXCEL: "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}


class ErrorResponse(BaseModel):
    """Error response structure."""

    model_config = ConfigDict(extra="ignore")

    error: str
    code: Optional[str] = None
