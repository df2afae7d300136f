from pydantic import BaseModel


class SubscriptionStatus(BaseModel):
    isSubscribed: bool


class MessageResponse(BaseModel):
    message: str
