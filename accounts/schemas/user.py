from pydantic import BaseModel, ConfigDict, Field


class User(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    image: str | None = None


class UserCreate(BaseModel):
    # Rules are applied by the service so every field error is reported at once
    username: str | None = None
    email: str | None = None
    password: str | None = None


class UserUpdate(BaseModel):
    username: str | None = None
    image: str | None = None  # base64, PNG or JPEG


class LoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None


class AuthResponse(BaseModel):
    id: int
    username: str
    token: str


class PasswordResetRequest(BaseModel):
    email: str | None = None


class PasswordReset(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    password: str | None = None
    password_reset_token: str | None = Field(default=None, alias="passwordResetToken")


class Message(BaseModel):
    message: str
