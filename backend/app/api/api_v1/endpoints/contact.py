from __future__ import annotations

from fastapi import APIRouter, BackgroundTasks, Depends, Request, status

from app.api import deps
from app.core.errors import NotFoundError
from app.crud.contact import ContactStore
from app.schemas.contact import ContactCreated, ContactList, ContactOut, ContactSubmission
from app.services.intake import ContactIntake

router = APIRouter(tags=["contact"])


@router.post("/contacto", response_model=ContactCreated, status_code=status.HTTP_201_CREATED)
def submit_contact(
    request: Request,
    background_tasks: BackgroundTasks,
    submission: ContactSubmission = Depends(deps.get_submission),
    intake: ContactIntake = Depends(deps.get_intake),
) -> ContactCreated:
    contact = intake.submit(
        submission,
        defer=background_tasks.add_task,
        remote_ip=deps.get_client_ip(request),
    )
    return ContactCreated(message="Contact saved successfully", id=contact.id)


@router.get("/contactos", response_model=ContactList)
def list_contacts(store: ContactStore = Depends(deps.get_store)) -> ContactList:
    contacts = store.list_all()
    return ContactList(
        contactos=[ContactOut.model_validate(c) for c in contacts],
        total=len(contacts),
    )


@router.get("/contacto/{contact_id}", response_model=ContactOut)
def read_contact(contact_id: str, store: ContactStore = Depends(deps.get_store)) -> ContactOut:
    # ASCII digits only: str.isdigit() also accepts "²".
    if not (contact_id.isascii() and contact_id.isdigit()):
        raise NotFoundError()
    return store.get_by_id(int(contact_id))
