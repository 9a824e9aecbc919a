"""Practice records: companies, clients, projects and billing sources."""

from typing import Optional
from datetime import date
from decimal import Decimal

import structlog

from lexledger.database.base import Database
from lexledger.domain import errors
from lexledger.domain.currency import normalize_currency, quantize
from lexledger.domain.entities import (
    Client as ClientEntity,
    Company as CompanyEntity,
    Project as ProjectEntity,
    ProjectAssignment as ProjectAssignmentEntity,
)
from lexledger.domain.errors import ConflictError, NotFoundError, ValidationError
from lexledger.utils.amount_parser import to_decimal

logger = structlog.get_logger(__name__)


def _required(value: Optional[str], label: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValidationError(f"{label} is required")
    return value


class PracticeService:
    """Service for the practice records the ledger hangs off."""

    def __init__(self, db: Database):
        """Initialize practice service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_company(self, name: str) -> int:
        """Create a company.

        Raises:
            ValidationError: If name is empty
            ConflictError: If a company with this name exists
        """
        name = _required(name, "Company name")
        if self.db.get_company_by_name(name) is not None:
            raise ConflictError(f"Company '{name}' already exists")
        company_id = self.db.create_company(name)
        logger.info("company_created", company_id=company_id)
        return company_id

    def get_company(self, company_id: int) -> Optional[CompanyEntity]:
        return self.db.get_company(company_id)

    def list_companies(self) -> list[CompanyEntity]:
        return self.db.list_companies()

    def create_client(self, company_id: int, name: str) -> int:
        """Create a client of a company."""
        name = _required(name, "Client name")
        if self.db.get_company(company_id) is None:
            raise NotFoundError(errors.company_not_found(company_id))
        return self.db.create_client(company_id, name)

    def get_client(self, client_id: int) -> Optional[ClientEntity]:
        return self.db.get_client(client_id)

    def list_clients(self, company_id: int) -> list[ClientEntity]:
        return self.db.list_clients(company_id)

    def create_project(self, client_id: int, name: str) -> int:
        """Create a project for a client, in the client's company."""
        name = _required(name, "Project name")
        client = self.db.get_client(client_id)
        if client is None:
            raise NotFoundError(errors.client_not_found(client_id))
        return self.db.create_project(client.company_id, client_id, name)

    def get_project(self, project_id: int) -> Optional[ProjectEntity]:
        """Get project by ID."""
        return self.db.get_project(project_id)

    def list_projects(self, company_id: int, client_id: Optional[int] = None) -> list[ProjectEntity]:
        """List a company's projects, optionally for one client."""
        return self.db.list_projects(company_id, client_id=client_id)

    def _require_project(self, project_id: int) -> ProjectEntity:
        project = self.db.get_project(project_id)
        if project is None:
            raise NotFoundError(errors.project_not_found(project_id))
        return project

    def create_invoice(
        self,
        project_id: int,
        number: str,
        amount: object,
        currency: str = "USD",
        issued_on: Optional[date] = None,
    ) -> int:
        """Record an invoice issued on a project."""
        number = _required(number, "Invoice number")
        currency = normalize_currency(currency)
        try:
            value = quantize(to_decimal(amount), currency)
        except ValueError as e:
            raise ValidationError(f"Invalid amount: {e}")
        if value <= 0:
            raise ValidationError("Invoice amount must be positive")
        self._require_project(project_id)
        return self.db.create_invoice(project_id, number, value, currency, issued_on or date.today())

    def create_time_entry(
        self,
        project_id: int,
        lawyer: str,
        hours: object,
        entry_date: Optional[date] = None,
        description: Optional[str] = None,
    ) -> int:
        """Log hours worked on a project."""
        lawyer = _required(lawyer, "Lawyer")
        try:
            value = to_decimal(hours)
        except ValueError as e:
            raise ValidationError(f"Invalid hours: {e}")
        if value <= 0:
            raise ValidationError("Hours must be positive")
        self._require_project(project_id)
        return self.db.create_time_entry(
            project_id, lawyer, value.quantize(Decimal("0.01")), entry_date or date.today(), description
        )

    def assign_lawyer(self, project_id: int, lawyer: str, role: Optional[str] = None) -> int:
        """Assign a lawyer to a project."""
        lawyer = _required(lawyer, "Lawyer")
        self._require_project(project_id)
        return self.db.create_assignment(project_id, lawyer, role)

    def list_assignments(self, project_id: int) -> list[ProjectAssignmentEntity]:
        self._require_project(project_id)
        return self.db.list_assignments(project_id)
