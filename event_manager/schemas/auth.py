from pydantic import BaseModel


class LoginRequest(BaseModel):
    password: str = ""


class SessionOut(BaseModel):
    authenticated: bool
