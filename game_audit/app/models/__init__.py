from .location import Location
from .user import User
from .vendor import Vendor
from .machine import Machine
from .audit import AuditEntry
from .msp import MspEntry
from .silver import AgentSilverSlip, SilverEntry, SilverPurchase
from .delete_request import DeleteRequest
