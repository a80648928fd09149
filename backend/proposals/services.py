import logging

from django.db import transaction
from django.utils import timezone

from backend.core.exceptions import BusinessRuleError
from backend.core.utils import next_document_number, today
from .models import Contract, Proposal
from .pricing import calculate_pricing

logger = logging.getLogger('backend.proposals')

STATUS_TIMESTAMPS = {
    'SENT': 'sent_at',
    'VIEWED': 'viewed_at',
    'ACCEPTED': 'responded_at',
    'REJECTED': 'responded_at',
}


def apply_pricing(proposal):
    """Overwrite the stored totals with server-side figures"""
    pricing = calculate_pricing(
        proposal.services,
        discount=proposal.discount,
        discount_type=proposal.discount_type,
        tax_rate=proposal.tax_rate,
        payment_schedule=proposal.payment_schedule,
    )
    proposal.subtotal = pricing['subtotal']
    proposal.tax_amount = pricing['tax_amount']
    proposal.total_amount = pricing['total_amount']
    proposal.payment_schedule = pricing['payment_schedule']
    return pricing


@transaction.atomic
def save_proposal(data, instance=None, user=None):
    if instance is None:
        instance = Proposal(created_by=user)
        if not data.get('proposal_number'):
            data['proposal_number'] = next_document_number(Proposal, 'proposal_number', 'PROP')
    for field, value in data.items():
        setattr(instance, field, value)
    apply_pricing(instance)
    instance.save()
    return instance


def set_proposal_status(proposal, new_status):
    proposal.status = new_status
    update_fields = ['status', 'updated_at']
    stamp = STATUS_TIMESTAMPS.get(new_status)
    if stamp:
        setattr(proposal, stamp, timezone.now())
        update_fields.append(stamp)
    proposal.save(update_fields=update_fields)
    logger.info(f"Proposal {proposal.proposal_number} moved to {new_status}")
    return proposal


@transaction.atomic
def create_contract(data, user=None):
    if not data.get('contract_number'):
        data['contract_number'] = next_document_number(Contract, 'contract_number', 'CONTRACT')
    if data.get('status') == 'SIGNED' and not data.get('signed_date'):
        data['signed_date'] = today()
    return Contract.objects.create(created_by=user, **data)


def set_contract_status(contract, new_status):
    contract.status = new_status
    update_fields = ['status', 'updated_at']
    if new_status == 'SIGNED' and not contract.signed_date:
        contract.signed_date = today()
        update_fields.append('signed_date')
    contract.save(update_fields=update_fields)
    logger.info(f"Contract {contract.contract_number} moved to {new_status}")
    return contract


def _scope_from_services(services):
    lines = []
    for service in services or []:
        name = service.get('name') or service.get('service_type') or 'Service'
        description = service.get('description')
        lines.append(f"{name}: {description}" if description else name)
    return '\n'.join(lines)


def _deliverables_from_services(services):
    items = []
    for service in services or []:
        items.extend(str(d) for d in service.get('deliverables') or [])
    return '\n'.join(f"- {item}" for item in items)


@transaction.atomic
def convert_proposal_to_contract(proposal, user=None):
    """Draft a contract from an accepted proposal"""
    if proposal.status != 'ACCEPTED':
        raise BusinessRuleError('Only accepted proposals can be converted to a contract.')
    existing = proposal.contracts.first()
    if existing is not None:
        raise BusinessRuleError(f"Proposal already converted to contract {existing.contract_number}.")

    contract = create_contract({
        'client': proposal.client,
        'proposal': proposal,
        'title': proposal.title,
        'scope_of_work': proposal.executive_summary or _scope_from_services(proposal.services),
        'deliverables': _deliverables_from_services(proposal.services),
        'contract_value': proposal.total_amount,
        'payment_terms': proposal.payment_terms,
        'start_date': proposal.project_start_date,
        'end_date': proposal.project_end_date,
        'terms_and_conditions': proposal.terms_and_conditions,
        'status': 'DRAFT',
    }, user=user)
    logger.info(f"Proposal {proposal.proposal_number} converted to contract {contract.contract_number}")
    return contract
