from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class QueueStats(BaseModel):
    name: str
    max_calls_per_second: float
    tasks_waiting: int = 0
    tasks_enqueued: int = 0
    tasks_removed: int = 0
    tasks_executed: int = 0
    tasks_succeeded: int = 0
    tasks_failed: int = 0
    is_active: bool = False
    last_execution_at: Optional[datetime] = None
