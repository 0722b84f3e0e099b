"""
reporter.py: Records the outcome of finished runs.

The personal best is updated synchronously when a run ends, so the game-over
screen never waits on the network. Session and score uploads run on worker
threads. Each run gets its own record and a worker only ever writes into the
record it was started for, so a slow response from an old run cannot leak
into the current one.
"""

import logging
import threading
from dataclasses import dataclass
from typing import List, Optional

from .data_models import RunOutcome, SessionHandle
from .errors import PersistenceError

logger = logging.getLogger(__name__)


@dataclass
class RunRecord:
    run_id: int
    character: str
    mode: str
    session: Optional[SessionHandle] = None
    opener: Optional[threading.Thread] = None
    outcome: Optional[RunOutcome] = None
    saved: Optional[bool] = None   # None until a score upload finished


class OutcomeReporter:
    def __init__(self, best_cache, store=None, background: bool = True):
        """
        best_cache: get_best()/set_best() for the personal best.
        store: persistence contract (create_session, update_session, save_score),
               or None to keep everything local.
        background: run uploads on threads; False runs them inline.
        """
        self.best_cache = best_cache
        self.store = store
        self.background = background
        self.lock = threading.Lock()
        self.current: Optional[RunRecord] = None
        self._threads: List[threading.Thread] = []

    # ----------------- Workers -----------------

    def _submit(self, target, *args) -> Optional[threading.Thread]:
        if not self.background:
            self._guarded(target, *args)
            return None
        thread = threading.Thread(target=self._guarded, args=(target, *args), daemon=True)
        self._threads = [t for t in self._threads if t.is_alive()]
        self._threads.append(thread)
        thread.start()
        return thread

    def _guarded(self, target, *args):
        try:
            target(*args)
        except PersistenceError as e:
            logger.warning("%s failed: %s", target.__name__, e)
        except Exception:
            logger.exception("Unexpected error in %s", target.__name__)

    def _is_stale(self, record: RunRecord) -> bool:
        with self.lock:
            return record is not self.current

    def _open_session(self, record: RunRecord):
        handle = self.store.create_session(record.character, record.mode)
        record.session = handle
        if self._is_stale(record):
            logger.debug("Session for run %d arrived after a restart", record.run_id)

    def _close_session(self, record: RunRecord):
        if record.opener is not None:
            record.opener.join()
        if record.session is None:
            record.session = self.store.create_session(record.character, record.mode)
        if record.session is None:
            return
        outcome = record.outcome
        self.store.update_session(record.session, outcome.score, outcome.boost_count)

    def _save_score(self, record: RunRecord, name: str):
        outcome = record.outcome
        try:
            ok = bool(self.store.save_score(name, outcome.score, outcome.character))
        except PersistenceError as e:
            logger.warning("Score for run %d not saved: %s", record.run_id, e)
            ok = False
        with self.lock:
            record.saved = ok
            if record is not self.current:
                logger.debug("Discarding save result of stale run %d", record.run_id)

    # ----------------- Public API -----------------

    def begin_run(self, sim) -> RunRecord:
        """Starts tracking a new run and opens its session in the background."""
        record = RunRecord(run_id=sim.run_id, character=sim.character, mode=sim.mode)
        with self.lock:
            self.current = record
        if self.store is not None:
            record.opener = self._submit(self._open_session, record)
        return record

    def report(self, sim) -> RunOutcome:
        """
        Freezes the final score of a finished run and updates the personal best.
        Calling it again for the same run returns the same outcome.
        """
        with self.lock:
            record = self.current
        if record is None or record.run_id != sim.run_id:
            record = RunRecord(run_id=sim.run_id, character=sim.character, mode=sim.mode)
            with self.lock:
                self.current = record
        if record.outcome is not None:
            return record.outcome

        previous = self.best_cache.get_best()
        new_best = sim.score > previous
        if new_best:
            try:
                self.best_cache.set_best(sim.score)
            except OSError as e:
                logger.warning("Could not store best score %d: %s", sim.score, e)

        record.outcome = RunOutcome(
            run_id=sim.run_id,
            score=sim.score,
            best=max(previous, sim.score),
            new_best=new_best,
            character=sim.character,
            mode=sim.mode,
            boost_count=sim.boost_count,
            duration=sim.elapsed,
        )
        if self.store is not None:
            self._submit(self._close_session, record)
        return record.outcome

    def submit_score(self, name: str) -> bool:
        """Uploads the finished run's score under `name`. False if there is nothing to send."""
        with self.lock:
            record = self.current
        if self.store is None or record is None or record.outcome is None:
            return False
        self._submit(self._save_score, record, name)
        return True

    @property
    def last_outcome(self) -> Optional[RunOutcome]:
        record = self.current
        return record.outcome if record is not None else None

    @property
    def saved(self) -> Optional[bool]:
        """Upload status of the current run's score."""
        record = self.current
        return record.saved if record is not None else None

    def join(self, timeout: Optional[float] = None):
        """Waits for pending uploads, e.g. before the window closes."""
        for thread in list(self._threads):
            thread.join(timeout)
