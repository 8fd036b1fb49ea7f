import pytest

from src.visit_tracker.visit_tracker.clients.service import ClientService
from src.visit_tracker.visit_tracker.core.exceptions import ConflictError, NotFoundError, ValidationError


def test_create_list_delete(client_repo, clock):
    svc = ClientService(client_repo, clock=clock)
    svc.create(name="Globex", company="Globex Inc", location="Guindy")
    created = svc.create(name="Acme", company="Acme Corp", location=" ")

    assert created.location is None
    assert created.created_at == clock.now
    assert [c.name for c in svc.list_clients()] == ["Acme", "Globex"]

    svc.delete("Acme")
    assert [c.name for c in svc.list_clients()] == ["Globex"]


def test_duplicate_client_conflicts(client_repo, clock):
    svc = ClientService(client_repo, clock=clock)
    svc.create(name="Acme")
    with pytest.raises(ConflictError):
        svc.create(name="Acme")


def test_delete_missing_client(client_repo, clock):
    with pytest.raises(NotFoundError):
        ClientService(client_repo, clock=clock).delete("Nobody")


def test_client_name_required(client_repo, clock):
    with pytest.raises(ValidationError):
        ClientService(client_repo, clock=clock).create(name="")
