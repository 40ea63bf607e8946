from __future__ import annotations

import logging
import time
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from typing import IO, Any

from ..db.store import UserStore
from ..errors import EmptyBatchError, ParseError, TransportError, ValidationError
from ..excel.reader import read_first_sheet
from ..logging.error_log import ErrorLogBuffer
from ..models.config_models import AppConfig
from ..models.error_record import INVALID_RECORD, PARSE_ERROR, TRANSPORT_ERROR, UNMAPPABLE_ROW, ErrorRecord
from ..models.processing_result import IngestionResult, MutationResult
from ..models.row_data import RawInputRow
from ..models.user_record import UserRecord
from ..normalize.fields import missing_fields, normalize_row
from ..normalize.validator import REQUIRED_MESSAGE, find_problems, validate_record
from .batch_mutator import BatchMutator
from .deletion import DeleteFlow
from .notices import NoticeBoard
from .progress import RowProgress
from .selection import SelectionTracker

"""Ingestion orchestration and the user list state around it.

UserPanel is the single mutator of the displayed record list. Every action runs
Normalizer -> Validator -> BatchMutator for its input source, then re-reads the
whole list from storage. Core errors never escape an action: they become the
user-facing text held by the NoticeBoard (and, for rejected rows / failed
calls, entries in the error log).
"""

__all__ = [
    "UserPanel",
    "FORM_SOURCE",
    "LOAD_FAILED",
    "CREATE_FAILED",
    "IMPORT_FAILED",
    "PARSE_FAILED",
    "DELETE_FAILED",
    "NO_VALID_USERS",
]

logger = logging.getLogger(__name__)

FORM_SOURCE = "form"
DELETE_SOURCE = "delete"
REJECTION_TYPES = frozenset({UNMAPPABLE_ROW, INVALID_RECORD})

LOAD_FAILED = "Failed to load users"
CREATE_FAILED = "Failed to create user"
IMPORT_FAILED = "Failed to import users"
PARSE_FAILED = "Failed to parse excel file"
DELETE_FAILED = "Failed to delete users"
NO_VALID_USERS = "No valid users found in file. Ensure columns are: name, age, birth"


class UserPanel:
    """Record list + ingestion / deletion actions.

    Args:
        store: storage collaborator (PostgresUserStore or InMemoryUserStore)
        config: app config (aliases, notice TTL, error log dir)
        notices: message board; one is created from config when omitted
        error_log: rejection log buffer; one is created from config when omitted
    """

    def __init__(
        self,
        store: UserStore,
        config: AppConfig | None = None,
        notices: NoticeBoard | None = None,
        error_log: ErrorLogBuffer | None = None,
    ) -> None:
        self.config = config or AppConfig()
        self.store = store
        self.mutator = BatchMutator(store)
        self.notices = notices or NoticeBoard(ttl_seconds=self.config.notice_ttl_seconds)
        self.error_log = error_log or ErrorLogBuffer(self.config.error_log_dir)
        self.selection = SelectionTracker()
        self.deletes = DeleteFlow()
        self.users: list[UserRecord] = []
        # 今回の操作で弾いた行 (error_log の書き出し成否に依存しない)
        self._rejected: list[ErrorRecord] = []

    # ------------------------------------------------------------------ list

    def refresh(self) -> bool:
        """Replace the displayed list with storage truth.

        A failure here is a page-level error, separate from the create/delete
        message channels.
        """
        try:
            self.users = self.store.select()
        except Exception as e:
            logger.error("refresh failed: %s", e)
            self.notices.set_page_error(LOAD_FAILED)
            return False
        self.notices.set_page_error(None)
        logger.debug("refresh loaded=%d", len(self.users))
        return True

    # ------------------------------------------------------------ ingestion

    def submit_form(self, form: Mapping[str, Any]) -> IngestionResult:
        """Single-record form path. Any validation failure aborts before storage."""
        start = time.perf_counter()
        self.notices.set_form_error(None)
        self.notices.clear_success()
        self._rejected = []

        row = RawInputRow.from_form(form)
        try:
            record = validate_record(normalize_row(row, self.config.aliases))
        except ValidationError as e:
            self._reject(FORM_SOURCE, row.row_number, INVALID_RECORD, "; ".join(e.problems) or str(e))
            self.notices.set_form_error(REQUIRED_MESSAGE)
            return self._finish(FORM_SOURCE, 1, start, error=REQUIRED_MESSAGE)

        try:
            mutation = self.mutator.bulk_insert([record])
        except TransportError as e:
            logger.error("create failed: %s", e)
            self._reject(FORM_SOURCE, -1, TRANSPORT_ERROR, str(e))
            self.notices.set_form_error(CREATE_FAILED)
            return self._finish(FORM_SOURCE, 1, start, accepted=[record], error=CREATE_FAILED)

        self.refresh()
        self.notices.flash_success("User created successfully")
        logger.info("created user name=%s", record.name)
        return self._finish(FORM_SOURCE, 1, start, accepted=[record], mutation=mutation)

    def import_workbook(self, source: Path | IO[bytes], source_name: str | None = None) -> IngestionResult:
        """Spreadsheet path: first sheet, rows normalized then filtered."""
        start = time.perf_counter()
        name = source_name or (source.name if isinstance(source, Path) else "upload.xlsx")
        self.notices.clear_success()
        self.notices.set_form_error(None)
        self._rejected = []

        try:
            sheet = read_first_sheet(source)
        except ParseError as e:
            logger.error("parse failed source=%s: %s", name, e)
            self._reject(name, -1, PARSE_ERROR, str(e))
            self.notices.set_form_error(PARSE_FAILED)
            return self._finish(name, 0, start, error=PARSE_FAILED)

        logger.info("read sheet=%s rows=%d source=%s", sheet.sheet_name, len(sheet.rows), name)
        return self.ingest_rows(sheet.rows, name, start=start)

    def ingest_rows(
        self, rows: Sequence[RawInputRow], source_name: str, *, start: float | None = None
    ) -> IngestionResult:
        """Normalize, filter and insert a batch of rows as one submission."""
        start = time.perf_counter() if start is None else start
        self._rejected = []
        candidates = self._normalize_all(rows, source_name)

        accepted: list[UserRecord] = []
        for record, row_number in candidates:
            problems = find_problems(record)
            if problems:
                self._reject(source_name, row_number, INVALID_RECORD, "; ".join(problems))
                continue
            accepted.append(record)

        try:
            if not accepted:
                raise EmptyBatchError(f"no valid rows in {source_name}")
            mutation = self.mutator.bulk_insert(accepted)
        except EmptyBatchError as e:
            logger.warning("%s", e)
            self.notices.set_form_error(NO_VALID_USERS)
            return self._finish(source_name, len(rows), start, error=NO_VALID_USERS)
        except TransportError as e:
            logger.error("import failed source=%s: %s", source_name, e)
            self._reject(source_name, -1, TRANSPORT_ERROR, str(e))
            self.notices.set_form_error(IMPORT_FAILED)
            return self._finish(source_name, len(rows), start, accepted=accepted, error=IMPORT_FAILED)

        self.refresh()
        self.notices.flash_success(f"Successfully imported {len(accepted)} users")
        logger.info("imported source=%s accepted=%d rejected=%d", source_name, len(accepted), len(rows) - len(accepted))
        return self._finish(source_name, len(rows), start, accepted=accepted, mutation=mutation)

    def _normalize_all(
        self, rows: Sequence[RawInputRow], source_name: str
    ) -> list[tuple[UserRecord, int]]:
        candidates: list[tuple[UserRecord, int]] = []
        with RowProgress(len(rows)) as progress:
            for row in progress.track(rows):
                record = normalize_row(row, self.config.aliases)
                if record is None:
                    missing = missing_fields(row, self.config.aliases)
                    self._reject(source_name, row.row_number, UNMAPPABLE_ROW, f"missing: {', '.join(missing)}")
                    continue
                candidates.append((record, row.row_number))
        return candidates

    # ------------------------------------------------------------- deletion

    def request_delete(self, ids: Iterable[int]) -> str:
        """Single-row (or explicit ids) delete: straight to confirmation."""
        return self.deletes.request(list(ids))

    def request_delete_selected(self) -> str | None:
        """Resolve the selection against the loaded list; None if nothing resolves."""
        ids = self.selection.resolve_ids(self.users)
        if not ids:
            return None
        return self.deletes.request(ids)

    def cancel_delete(self) -> None:
        self.deletes.cancel()
        self.selection.clear()

    def confirm_delete(self) -> MutationResult | None:
        """Run the pending delete. Returns None when it failed or had no ids."""
        ids = self.deletes.begin()
        self._rejected = []
        try:
            if not ids:
                return None
            try:
                result = self.mutator.bulk_delete(ids)
            except TransportError as e:
                logger.error("delete failed ids=%s: %s", list(ids), e)
                self._reject(DELETE_SOURCE, -1, TRANSPORT_ERROR, str(e))
                self.notices.flash_delete_error(DELETE_FAILED)
                return None
            self.refresh()
            self.selection.clear()
            self.notices.flash_success(f"Successfully deleted {len(ids)} users")
            logger.info("deleted ids=%d", len(ids))
            return result
        finally:
            self.deletes.settle()
            self._flush_error_log()

    # -------------------------------------------------------------- helpers

    def _reject(self, source: str, row: int, error_type: str, message: str) -> None:
        record = ErrorRecord.create(source=source, row=row, error_type=error_type, message=message)
        self._rejected.append(record)
        self.error_log.append(record)

    def _finish(
        self,
        source: str,
        total_rows: int,
        start: float,
        *,
        accepted: list[UserRecord] | None = None,
        mutation: MutationResult | None = None,
        error: str | None = None,
    ) -> IngestionResult:
        rejected = [r for r in self._rejected if r.error_type in REJECTION_TYPES]
        self._flush_error_log()
        return IngestionResult(
            source=source,
            total_rows=total_rows,
            accepted=list(accepted or []),
            rejected=rejected,
            mutation=mutation,
            elapsed_seconds=time.perf_counter() - start,
            error=error,
        )

    def _flush_error_log(self) -> None:
        try:
            path = self.error_log.flush()
        except OSError as e:
            # 書き込めないまま溜め続けない
            dropped = self.error_log.clear()
            logger.warning("failed to write error log (%d records dropped): %s", dropped, e)
            return
        if path is not None:
            logger.info("error log written to %s", path)
