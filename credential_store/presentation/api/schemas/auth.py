from pydantic import BaseModel


class VerifyCredentialsRequest(BaseModel):
    handle: str
    secret: str


class VerifyCredentialsResponse(BaseModel):
    user_id: str
