from .ledger import ProcessedEvent
from .entity import JobSeeker, Company, StaffMember, DOMAIN_ENTITY_MODELS
