from typing import Optional

from pydantic import BaseModel


class PreviewValidation(BaseModel):
    """Outcome of a preview-key check; failures are values, not exceptions."""

    error: bool
    message: Optional[str] = None
