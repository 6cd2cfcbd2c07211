"""
Code existence check against the catalog.

Checks are tagged with a sequence number kept on the wizard state. Only the
answer to the most recently issued check is applied; older answers are
dropped when they arrive late.

Code edits are coalesced by a Debouncer: a new edit replaces the pending
timer of its session, while a check that already went out is left to finish
and lose on sequence number.
"""

import asyncio
from typing import Awaitable, Callable, Iterable, Optional
import structlog

from config import settings
from integrations.catalog_api import CatalogAPIClient, get_catalog_client
from integrations.notifications import Notifier
from models.import_wizard import ImportWizardState
from services import reconciliation_service
from services import wizard_session_service
from exceptions import WizardSessionNotFoundError
from utils.text_utils import normalize_code

logger = structlog.get_logger(__name__)


def issue_check(state: ImportWizardState) -> tuple[ImportWizardState, int, list[str]]:
    """
    Start a new check.

    Returns:
        Tuple of (state with the new latest_seq, seq, unique codes to check)
    """
    seq = state.code_check.latest_seq + 1
    codes = reconciliation_service.batch_codes(state.rows)
    new_state = state.model_copy(update={
        "code_check": state.code_check.model_copy(update={"latest_seq": seq})
    })
    return new_state, seq, codes


def resolve_check(
    state: ImportWizardState,
    seq: int,
    existing_codes: Iterable[str],
    reselect: Optional[bool] = None
) -> tuple[ImportWizardState, bool]:
    """
    Apply the answer to check `seq`.

    Answers to anything but the latest issued check are discarded.

    Returns:
        Tuple of (new state, whether the answer was applied)
    """
    if seq != state.code_check.latest_seq:
        logger.info(
            "code_check_discarded",
            seq=seq,
            latest_seq=state.code_check.latest_seq
        )
        return state, False

    if reselect is None:
        reselect = settings.reselect_existing_on_check

    existing = frozenset(normalize_code(code) for code in existing_codes if code)
    rows = reconciliation_service.apply_existing_codes(state.rows, existing, reselect=reselect)

    logger.info("code_check_applied", seq=seq, existing=len(existing))

    return state.model_copy(update={
        "rows": rows,
        "code_check": state.code_check.model_copy(update={
            "applied_seq": seq,
            "existing_codes": existing,
        }),
    }), True


class Debouncer:
    """
    Per-key asyncio timer.

    schedule() replaces the pending timer of a key. Once a timer fires its
    callback is no longer pending and cancel() leaves it running.
    """

    def __init__(self, delay_seconds: Optional[float] = None):
        self.delay_seconds = (
            settings.code_check_debounce_seconds if delay_seconds is None else delay_seconds
        )
        self._pending: dict[str, asyncio.Task] = {}
        # strong refs until done; the loop only keeps weak ones
        self._tasks: set[asyncio.Task] = set()

    def schedule(self, key: str, callback: Callable[[], Awaitable]) -> asyncio.Task:
        """Must be called from a running event loop."""
        self.cancel(key)
        task = asyncio.get_running_loop().create_task(self._fire(key, callback))
        self._pending[key] = task
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _fire(self, key: str, callback: Callable[[], Awaitable]):
        await asyncio.sleep(self.delay_seconds)
        if self._pending.get(key) is asyncio.current_task():
            del self._pending[key]
        return await callback()

    def cancel(self, key: str) -> bool:
        task = self._pending.pop(key, None)
        if task is None or task.done():
            return False
        task.cancel()
        logger.debug("debounce_superseded", key=key)
        return True

    def is_pending(self, key: str) -> bool:
        return key in self._pending


class CodeCheckService:
    """Runs code checks for a wizard, immediately or debounced per session."""

    def __init__(
        self,
        client: Optional[CatalogAPIClient] = None,
        debouncer: Optional[Debouncer] = None
    ):
        self.client = client or get_catalog_client()
        self.debouncer = debouncer or Debouncer()

    def check_state(self, state: ImportWizardState, notifier: Notifier) -> ImportWizardState:
        """
        Check the batch codes now.

        On failure an error toast is raised and the rows stay as they are.
        """
        state, seq, codes = issue_check(state)
        try:
            existing = self.client.imports.check_codes(codes)
        except Exception as e:
            logger.error("code_check_failed", seq=seq, codes=len(codes), error=str(e))
            notifier.error(e)
            return state

        state, _ = resolve_check(state, seq, existing)
        return state

    async def run_session_check(self, session_id: str) -> bool:
        """
        Check the codes of a stored wizard and save the result.

        The state is read again after the API answers, so edits made while
        the request was out are kept and a newer check wins.

        Returns:
            True if the answer was applied
        """
        try:
            session = wizard_session_service.get_session(session_id)
        except WizardSessionNotFoundError:
            logger.info("code_check_session_gone", session_id=session_id)
            return False

        state, seq, codes = issue_check(session.state)
        wizard_session_service.save_state(session_id, state)

        try:
            existing = await asyncio.to_thread(self.client.imports.check_codes, codes)
        except Exception as e:
            logger.error(
                "code_check_failed",
                session_id=session_id,
                seq=seq,
                error=str(e)
            )
            notifier = Notifier()
            notifier.error(e)
            wizard_session_service.push_notifications(session_id, notifier.drain())
            return False

        try:
            session = wizard_session_service.get_session(session_id)
        except WizardSessionNotFoundError:
            logger.info("code_check_session_gone", session_id=session_id, seq=seq)
            return False

        state, applied = resolve_check(session.state, seq, existing)
        if applied:
            wizard_session_service.save_state(session_id, state)
        return applied

    def schedule_session_check(self, session_id: str) -> asyncio.Task:
        """Debounced run_session_check; a newer edit replaces a pending one."""
        return self.debouncer.schedule(
            session_id,
            lambda: self.run_session_check(session_id)
        )


# Singleton instance for convenience
_code_check_service: Optional[CodeCheckService] = None

def get_code_check_service() -> CodeCheckService:
    """Get or create CodeCheckService instance."""
    global _code_check_service
    if _code_check_service is None:
        _code_check_service = CodeCheckService()
    return _code_check_service
