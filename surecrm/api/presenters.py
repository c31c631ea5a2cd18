"""
Response builders that apply privacy masking to client-facing records.
"""
from typing import Iterable, List, Optional

from surecrm.db import schemas
from surecrm.privacy import mask_record

CLIENT_MASKED_FIELDS = ("full_name", "phone", "email", "address")
POLICY_MASKED_FIELDS = ("policy_number", "contractor_name", "insured_name", "beneficiary_name")
DOCUMENT_MASKED_FIELDS = ("file_name", "file_path")
CONTACT_MASKED_FIELDS = ("subject", "content", "outcome", "next_action")


def _masked_copy(item, fields, level, show_confidential: bool):
    current = {field: getattr(item, field) for field in fields}
    masked = mask_record(current, fields, level, show_confidential)
    return item.model_copy(update=masked)


def present_client(
    client,
    show_confidential: bool,
    *,
    tags: Optional[Iterable] = None,
    stage_name: Optional[str] = None,
    schema=schemas.ClientListItem,
):
    item = schema.model_validate(client)
    item = item.model_copy(
        update={
            "tags": [schemas.TagBadge.model_validate(t) for t in (tags or [])],
            "stage_name": stage_name,
        }
    )
    return _masked_copy(item, CLIENT_MASKED_FIELDS, client.privacy_level, show_confidential)


def present_client_summary(client, show_confidential: bool) -> schemas.ClientSummary:
    item = schemas.ClientSummary.model_validate(client)
    return _masked_copy(item, ("full_name", "phone"), client.privacy_level, show_confidential)


def present_policy(policy, show_confidential: bool) -> schemas.InsurancePolicy:
    item = schemas.InsurancePolicy.model_validate(policy)
    return _masked_copy(item, POLICY_MASKED_FIELDS, policy.privacy_level, show_confidential)


def present_policies(policies, show_confidential: bool) -> List[schemas.InsurancePolicy]:
    return [present_policy(p, show_confidential) for p in policies]


def present_document(document, show_confidential: bool) -> schemas.Document:
    item = schemas.Document.model_validate(document)
    return _masked_copy(item, DOCUMENT_MASKED_FIELDS, document.privacy_level, show_confidential)


def present_documents(documents, show_confidential: bool) -> List[schemas.Document]:
    return [present_document(d, show_confidential) for d in documents]


def present_contact(contact, show_confidential: bool) -> schemas.ContactHistory:
    item = schemas.ContactHistory.model_validate(contact)
    return _masked_copy(item, CONTACT_MASKED_FIELDS, contact.privacy_level, show_confidential)


def present_contacts(contacts, show_confidential: bool) -> List[schemas.ContactHistory]:
    return [present_contact(c, show_confidential) for c in contacts]
