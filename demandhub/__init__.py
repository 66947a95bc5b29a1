# Demand management client

from demandhub.client.application.dispatcher import ViewScope
from demandhub.client.client import DemandClient
from demandhub.common.decorators import requires_login, requires_role
from demandhub.common.models import Demand, DemandStatus, Identity, Role

__all__ = [
    "Demand",
    "DemandClient",
    "DemandStatus",
    "Identity",
    "Role",
    "ViewScope",
    "requires_login",
    "requires_role",
]
