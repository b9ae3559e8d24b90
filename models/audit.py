from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class AuditEntry:
    timestamp: datetime
    action: str              # "admit", "approve", "reject", "remove", "reset"
    record_id: Optional[str]
    old_status: str
    new_status: str
    actor: str = ""
    detail: str = ""
