"""Polka billing webhook schemas"""
from pydantic import BaseModel

USER_UPGRADED_EVENT = "user.upgraded"


class PolkaEventData(BaseModel):
    user_id: int


class PolkaEvent(BaseModel):
    event: str
    data: PolkaEventData
