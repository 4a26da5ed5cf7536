from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel


class ChangeLogOut(BaseModel):
    id: int
    action: str
    table_name: str
    record_id: int
    event_id: Optional[int]
    user_id: Optional[int]
    old_data: Optional[Dict[str, Any]]
    new_data: Optional[Dict[str, Any]]
    user_ip: Optional[str]
    user_agent: Optional[str]
    referer: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True
