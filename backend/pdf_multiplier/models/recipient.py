"""Recipient model and HR payload adapter"""
from pydantic import BaseModel
from typing import Any, Dict, Optional


class Recipient(BaseModel):
    """A single user who receives one personalized copy"""
    id: Optional[str] = None
    employee_internal_id: Optional[str] = None
    first_name: str = ""
    last_name: str = ""
    display_name: str = ""
    email: str = ""

    @property
    def full_name(self) -> str:
        full = f"{self.first_name} {self.last_name}".strip()
        return full or self.display_name

    @property
    def label(self) -> str:
        """Human readable name used in progress reports and logs"""
        return (
            self.full_name
            or self.email
            or self.employee_internal_id
            or self.id
            or "Unknown user"
        )

    @property
    def upload_id(self) -> Optional[str]:
        """Identifier used in the per-user upload endpoint"""
        return self.id or self.employee_internal_id

    @classmethod
    def from_humand(cls, payload: Dict[str, Any]) -> "Recipient":
        """
        Map a Humand user payload (camelCase) or an already canonical
        payload (snake_case) onto the canonical field set

        Args:
            payload: Raw user dictionary

        Returns:
            Recipient
        """
        def pick(*keys: str) -> Any:
            for key in keys:
                value = payload.get(key)
                if value not in (None, ""):
                    return value
            return None

        user_id = pick("id")
        internal_id = pick("employee_internal_id", "employeeInternalId")
        first_name = pick("first_name", "firstName") or ""
        last_name = pick("last_name", "lastName") or ""
        display_name = pick("full_name", "fullName", "display_name", "displayName") or ""

        return cls(
            id=str(user_id) if user_id is not None else None,
            employee_internal_id=str(internal_id) if internal_id is not None else None,
            first_name=first_name,
            last_name=last_name,
            display_name=display_name or f"{first_name} {last_name}".strip(),
            email=pick("email") or "",
        )
