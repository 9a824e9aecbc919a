"""Tests for PracticeService."""

from datetime import date
from decimal import Decimal

import pytest

from lexledger.domain.errors import ConflictError, NotFoundError, ValidationError


def test_create_company(practice_service):
    company_id = practice_service.create_company("  Hassan & Partners ")

    company = practice_service.get_company(company_id)
    assert company.name == "Hassan & Partners"
    assert [c.id for c in practice_service.list_companies()] == [company_id]


def test_duplicate_company_name(practice_service, company):
    with pytest.raises(ConflictError):
        practice_service.create_company(company.name)


def test_empty_names_rejected(practice_service, company, client):
    with pytest.raises(ValidationError):
        practice_service.create_company("")
    with pytest.raises(ValidationError):
        practice_service.create_client(company.id, "  ")
    with pytest.raises(ValidationError):
        practice_service.create_project(client.id, "")


def test_project_inherits_client_company(practice_service, company, client):
    project_id = practice_service.create_project(client.id, "Arbitration")

    project = practice_service.get_project(project_id)
    assert project.company_id == company.id
    assert project.client_id == client.id


def test_list_projects_by_client(practice_service, company, client, project):
    other_client = practice_service.create_client(company.id, "Delta Foods")
    practice_service.create_project(other_client, "Trademark filing")

    assert [p.id for p in practice_service.list_projects(company.id, client_id=client.id)] == [project.id]
    assert len(practice_service.list_projects(company.id)) == 2


def test_unknown_parents(practice_service):
    with pytest.raises(NotFoundError):
        practice_service.create_client(99, "Ghost")
    with pytest.raises(NotFoundError):
        practice_service.create_project(99, "Ghost matter")
    with pytest.raises(NotFoundError):
        practice_service.create_invoice(99, "INV-1", "10")


def test_invoice_and_time_entry(temp_db, practice_service, project):
    invoice_id = practice_service.create_invoice(project.id, "INV-9", "1,500.00", "egp", date(2024, 6, 1))
    entry_id = practice_service.create_time_entry(project.id, "N. Adel", "1.25", date(2024, 5, 30), "Drafting")

    invoice = temp_db.get_invoice(invoice_id)
    assert invoice.amount == Decimal("1500")
    assert invoice.currency == "EGP"
    entry = temp_db.get_time_entry(entry_id)
    assert entry.hours == Decimal("1.25")
    assert entry.description == "Drafting"


def test_invalid_invoice_and_hours(practice_service, project):
    with pytest.raises(ValidationError):
        practice_service.create_invoice(project.id, "INV-1", "-5")
    with pytest.raises(ValidationError):
        practice_service.create_time_entry(project.id, "N. Adel", "0")


def test_assign_lawyer(practice_service, project):
    practice_service.assign_lawyer(project.id, "N. Adel", "associate")
    practice_service.assign_lawyer(project.id, "M. Saleh")

    assignments = practice_service.list_assignments(project.id)
    assert {(a.lawyer, a.role) for a in assignments} == {("N. Adel", "associate"), ("M. Saleh", None)}
