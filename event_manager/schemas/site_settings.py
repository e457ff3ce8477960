from pydantic import BaseModel, Field, field_validator
from pydantic_core import PydanticCustomError


def _required_text(value, label: str, max_length: int) -> str:
    text = str(value).strip() if value is not None else ""
    if not text:
        raise PydanticCustomError("settings_field", f"{label} is required")
    if len(text) > max_length:
        raise PydanticCustomError("settings_field", f"{label} must be less than {max_length} characters")
    return text


class SiteSettingsUpdate(BaseModel):
    site_name: str = Field(default=None, validate_default=True)
    site_description: str = Field(default=None, validate_default=True)

    @field_validator("site_name", mode="before")
    @classmethod
    def check_site_name(cls, v):
        return _required_text(v, "Site name", 100)

    @field_validator("site_description", mode="before")
    @classmethod
    def check_site_description(cls, v):
        return _required_text(v, "Site description", 500)


class SiteSettingsOut(BaseModel):
    site_name: str
    site_description: str

    class Config:
        from_attributes = True
