"""Identity models carried by access tokens."""

from pydantic import BaseModel

from employee_api.models.domain.employee import EmployeeRole


class IssuedIdentity(BaseModel):
    """The claims asserted by an issued access token."""

    subject_id: int
    email: str
    document_number: int
    role: EmployeeRole


class CallerIdentity(IssuedIdentity):
    """Identity of the authenticated caller, decoded from a bearer token."""

    def can_act_on(self, role: EmployeeRole) -> bool:
        """Check whether the caller may grant or act upon ``role``.

        Equal roles are permitted.
        """
        return role <= self.role
