from raffle_desk.app.use_cases.base_dto import CamelModel
from raffle_desk.domain.entities import StaffRole


class AuthorizedUser(CamelModel):
    """Caller identity after the access guard let the request through"""

    email: str
    name: str
    role: StaffRole

    @property
    def is_admin(self) -> bool:
        return self.role == StaffRole.admin
