from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: the reference identity a check-in is verified against.

    Read-only here; signup, face registration and joining a company happen in
    other flows.
    """

    user_id: str
    role: Role
    company_code: Optional[str] = None
    reference_face_descriptor: Optional[Tuple[float, ...]] = None
    full_name: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
