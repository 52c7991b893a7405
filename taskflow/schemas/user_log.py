# taskflow/schemas/user_log.py
from typing import List, Literal, Optional
from datetime import datetime

from taskflow.schemas.envelope import CamelModel, Envelope

class UserLog(CamelModel):
    id: int
    user_id: int
    user_name: str
    user_email: str
    role: str
    action: Literal["login", "logout"]
    login_time: Optional[datetime] = None
    logout_time: Optional[datetime] = None
    token_id: str
    ip_address: str
    user_agent: str
    session_duration: Optional[int] = None
    created_at: datetime

class Pagination(CamelModel):
    current_page: int
    total_pages: int
    total_logs: int
    has_next_page: bool
    has_prev_page: bool
    limit: int

class UserLogPage(Envelope[List[UserLog]]):
    pagination: Pagination
