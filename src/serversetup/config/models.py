# src/serversetup/config/models.py

from typing import Optional
from pydantic import BaseModel, Field, field_validator


class ServerSettings(BaseModel):
    host: Optional[str] = None
    port_for_ssh: Optional[int] = Field(default=None, ge=1, le=65535)

    @field_validator("host")
    @classmethod
    def _blank_host_is_unset(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v.strip() if v else v


class RootSettings(BaseModel):
    password: Optional[str] = None


class SuperUserSettings(BaseModel):
    """The administrative user that receives the local public key."""
    name: Optional[str] = None
    password: Optional[str] = None


class Settings(BaseModel):
    server: ServerSettings = Field(default_factory=ServerSettings)
    root: RootSettings = Field(default_factory=RootSettings)
    super_user: SuperUserSettings = Field(default_factory=SuperUserSettings)

    @field_validator("server", "root", "super_user", mode="before")
    @classmethod
    def _null_section_is_empty(cls, v):
        # "server": null reads like a section with every field unset
        return {} if v is None else v
