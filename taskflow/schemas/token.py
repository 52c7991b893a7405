# taskflow/schemas/token.py
from pydantic import BaseModel

class TokenData(BaseModel):
    user_id: int
    role: str
    token: str
