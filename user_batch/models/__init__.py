"""Domain models for the user batch tool.

Canonical records, raw input rows, tagged cell values, configuration, and the
result / notice values produced by the services.
"""

from .cell_value import CellKind, CellValue
from .config_models import AppConfig, DatabaseConfig
from .delete_state import DeleteState
from .error_record import ErrorRecord
from .notice import Notice, NoticeKind
from .processing_result import IngestionResult, MutationResult, Operation
from .row_data import RawInputRow, RowSource
from .user_record import UserRecord

__all__ = [
    # Configuration models
    "AppConfig",
    "DatabaseConfig",
    # Input models
    "CellKind",
    "CellValue",
    "RawInputRow",
    "RowSource",
    # Records & results
    "UserRecord",
    "ErrorRecord",
    "IngestionResult",
    "MutationResult",
    "Operation",
    # UI state values
    "DeleteState",
    "Notice",
    "NoticeKind",
]
