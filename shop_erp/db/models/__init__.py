"""
ORM models for the shop's tables: masters, production, sales, attendance,
registers and console users.

Importing this package ensures model classes are registered with the Base
metadata for Alembic and runtime usage.
"""

from .master_data import (  # noqa: F401
    Customer,
    Employee,
    Part,
    Machine,
)
from .production import (  # noqa: F401
    Job,
    RoutingOperation,
    Challan,
    Tool,
)
from .sales import (  # noqa: F401
    Invoice,
    Enquiry,
    DispatchRecord,
)
from .attendance import (  # noqa: F401
    AttendanceRecord,
    AttendanceSummary,
)
from .inventory import InventoryItem  # noqa: F401
from .procurement import (  # noqa: F401
    PurchaseOrder,
    Expense,
)
from .quality import Inspection  # noqa: F401
from .maintenance import MaintenanceRecord  # noqa: F401
from .security import User  # noqa: F401
