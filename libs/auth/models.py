from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator


class AuthUser(BaseModel):
    """
    Represents an authenticated user from the identity provider's token.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    user_id: str = Field(..., alias="sub")
    email: Optional[EmailStr] = None
    role: str = "authenticated"
    roles: list[str] = Field(default_factory=list)
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def lift_metadata_claims(cls, data: Any) -> Any:
        """Pull roles from app_metadata and names from user_metadata."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        app_metadata = data.get("app_metadata") or {}
        user_metadata = data.get("user_metadata") or {}
        if "roles" not in data and isinstance(app_metadata.get("roles"), list):
            data["roles"] = app_metadata["roles"]
        data.setdefault("first_name", user_metadata.get("first_name"))
        data.setdefault("last_name", user_metadata.get("last_name"))
        return data

    @property
    def has_admin_claim(self) -> bool:
        return "admin" in self.roles or self.role == "service_role"
