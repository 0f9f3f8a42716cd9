"""
Model for a verified lawyer in the registry.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class LawyerRecord(BaseModel):
    """
    Pydantic model for a registry record, matching the lawyers table.
    """
    id: Optional[int] = None
    national_id: str
    letter_id: str
    full_name: str
    verified: bool = True
    created_at: Optional[datetime] = None
