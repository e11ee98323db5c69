"""Ranking session: the single owner of the current ranking.

Wires the engine, the snapshot repository, the CSV codec and the
navigation controller together. Every change is written through to the
repository; a failed write is logged and flagged but never rolls back the
in-memory ranking.
"""

import uuid
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from pathlib import Path

import structlog

from src.catalog.constants import COMPONENT_SESSION
from src.navigation.controller import NavigationController, NavigationResult
from src.navigation.keymap import KeyPress
from src.navigation.state_machine import FocusState
from src.ranking.engine import RankingEngine
from src.ranking.models import RankingState, ValueEntity
from src.ranking.views import ranking_view, unranked_pool
from src.status.models import ActionOutcome, StatusCode
from src.store.models import LoadSource
from src.store.snapshot import SnapshotRepository
from src.tabular.codec import deserialize, parse_csv_text, read_csv_file, serialize
from src.tabular.errors import ExportError, ParseError
from src.tabular.io import export_filename, write_csv
from src.tabular.reconcile import NameIndex, ReconcileResult, reconcile


logger = structlog.get_logger()


@dataclass(frozen=True)
class Progress:
    """How much of the catalog has been ranked.

    Attributes:
        sorted_count: Number of ranked values.
        total_count: Catalog size.
    """

    sorted_count: int
    total_count: int

    def __str__(self) -> str:
        return f"{self.sorted_count}/{self.total_count}"


class RankingSession:
    """Owns the current ranking and applies user actions to it.

    The stored snapshot is read once, on construction. Restored snapshots
    whose positions are not exactly 1..K are renumbered and written back.
    """

    def __init__(
        self,
        engine: RankingEngine,
        repository: SnapshotRepository,
        controller: NavigationController | None = None,
        today: Callable[[], date] = date.today,
        session_id: str | None = None,
    ) -> None:
        """Initialize the session and restore the stored ranking.

        Args:
            engine: Engine performing ranking changes.
            repository: Snapshot repository for write-through persistence.
            controller: Navigation controller; one over ``engine`` when omitted.
            today: Clock used for export file names.
            session_id: Optional session ID for logging context.
        """
        self._engine = engine
        self._repository = repository
        self._controller = controller or NavigationController(engine)
        self._today = today
        self._session_id = session_id or str(uuid.uuid4())
        self._log = logger.bind(component=COMPONENT_SESSION, session_id=self._session_id)
        self._persistence_ok = True
        self._last_outcome = ActionOutcome.of(StatusCode.READY)

        default = engine.default_state()
        self._index = NameIndex(default.values)
        if self._index.ambiguous_names:
            self._log.warning("catalog_names_ambiguous", names=self._index.ambiguous_names)

        loaded = repository.load(default)
        self._load_source = loaded.source
        self._state = loaded.state

        normalized = engine.normalize(self._state)
        if normalized is not self._state:
            self._state = normalized
            self._persist()

        self._log.info(
            "session_started",
            load_source=self._load_source.value,
            ranked_count=len(self.ranking),
            total_count=len(self._state.values),
        )

    # ===== Views =====

    @property
    def session_id(self) -> str:
        """Get the session ID."""
        return self._session_id

    @property
    def state(self) -> RankingState:
        """Current ranking state."""
        return self._state

    @property
    def load_source(self) -> LoadSource:
        """Where the initial ranking came from."""
        return self._load_source

    @property
    def persistence_ok(self) -> bool:
        """False once a snapshot write has failed, until one succeeds again."""
        return self._persistence_ok

    @property
    def last_outcome(self) -> ActionOutcome:
        """Outcome of the most recent action."""
        return self._last_outcome

    @property
    def ranking(self) -> list[ValueEntity]:
        """Ranked values in position order."""
        return ranking_view(self._state)

    @property
    def unranked(self) -> list[ValueEntity]:
        """Unranked values in catalog order."""
        return unranked_pool(self._state)

    @property
    def progress(self) -> Progress:
        """Ranked count over catalog size."""
        return Progress(sorted_count=len(self.ranking), total_count=len(self._state.values))

    @property
    def focus_state(self) -> FocusState:
        """Focus cursor state."""
        return self._controller.focus_state

    @property
    def focused_index(self) -> int | None:
        """Focused index into the ranking, or None."""
        return self._controller.focused_index

    def resolve(self, reference: str) -> ValueEntity | None:
        """Find a value by ID or, failing that, by case-insensitive name."""
        value = self._state.get(reference)
        if value is not None:
            return value
        match = self._index.lookup(reference)
        if match.value_id is None:
            return None
        return self._state.get(match.value_id)

    # ===== Ranking actions =====

    def promote(self, reference: str) -> ActionOutcome:
        """Append an unranked value to the end of the ranking."""
        value = self.resolve(reference)
        if value is None:
            return self._report(ActionOutcome.of(StatusCode.UNKNOWN_VALUE, name=reference))
        if not self._commit(self._engine.promote(self._state, value.id)):
            return self._report(ActionOutcome.of(StatusCode.NO_CHANGE))
        return self._report(ActionOutcome.of(StatusCode.ADDED, changed=True, name=value.name))

    def demote(self, reference: str) -> ActionOutcome:
        """Return a ranked value to the unranked pool."""
        value = self.resolve(reference)
        if value is None:
            return self._report(ActionOutcome.of(StatusCode.UNKNOWN_VALUE, name=reference))
        if not self._commit(self._engine.demote(self._state, value.id)):
            return self._report(ActionOutcome.of(StatusCode.NO_CHANGE))
        return self._report(
            ActionOutcome.of(StatusCode.REMOVED, changed=True, name=value.name)
        )

    def move(self, from_index: int, to_index: int) -> ActionOutcome:
        """Move the ranked value at ``from_index`` to ``to_index`` (zero-based)."""
        ranked = self.ranking
        if not self._commit(self._engine.move_within_ranking(self._state, from_index, to_index)):
            return self._report(ActionOutcome.of(StatusCode.NO_CHANGE))
        return self._report(
            ActionOutcome.of(
                StatusCode.MOVED_TO,
                changed=True,
                name=ranked[from_index].name,
                position=to_index + 1,
            )
        )

    def reset(self) -> ActionOutcome:
        """Discard the ranking and return every value to the pool."""
        self._commit(self._engine.reset(self._state))
        self._controller.cursor.clear()
        return self._report(ActionOutcome.of(StatusCode.RESET, changed=True))

    # ===== CSV exchange =====

    def export_rows(self) -> list[dict[str, str]]:
        """Current ranking as ``name``/``position`` records."""
        return [row.as_record() for row in serialize(self.ranking)]

    def export_csv(self, path: Path | None = None, directory: Path | None = None) -> ActionOutcome:
        """Write the ranking to a CSV file.

        Args:
            path: Explicit target file. Takes precedence over ``directory``.
            directory: Directory for a dated default file name; the current
                directory when omitted.

        Returns:
            EXPORTED on success, EXPORT_FAILED when the file cannot be written.
        """
        target = path or (directory or Path()) / export_filename(self._today())
        try:
            exported = write_csv(target, serialize(self.ranking))
        except ExportError as e:
            self._log.error("export_failed", path=str(target), reason=e.reason)
            return self._report(ActionOutcome.of(StatusCode.EXPORT_FAILED))
        self._log.info("ranking_exported", path=exported.path, row_count=exported.row_count)
        return self._report(ActionOutcome.of(StatusCode.EXPORTED))

    def import_csv(self, path: Path) -> ActionOutcome:
        """Replace the ranking with one read from a CSV file.

        Rows are matched to catalog values by name; unmatched rows and rows
        without a usable position are skipped. Positions that are not
        exactly 1..K are renumbered in their imported order.

        Returns:
            IMPORTED on success, IMPORT_FAILED when the file is unreadable.
        """
        try:
            raw_rows = read_csv_file(path)
        except ParseError as e:
            self._log.error("import_failed", source=e.source, reason=e.reason)
            return self._report(ActionOutcome.of(StatusCode.IMPORT_FAILED))
        self._apply_import(raw_rows)
        return self._report(ActionOutcome.of(StatusCode.IMPORTED, changed=True))

    def import_text(self, text: str) -> ActionOutcome:
        """Replace the ranking with one parsed from CSV text."""
        try:
            raw_rows = parse_csv_text(text)
        except ParseError as e:
            self._log.error("import_failed", source=e.source, reason=e.reason)
            return self._report(ActionOutcome.of(StatusCode.IMPORT_FAILED))
        self._apply_import(raw_rows)
        return self._report(ActionOutcome.of(StatusCode.IMPORTED, changed=True))

    def _apply_import(self, raw_rows: list[dict[object, object]]) -> ReconcileResult:
        result = reconcile(deserialize(raw_rows), self._engine.default_state(), self._index)
        self._commit(self._engine.normalize(result.state))
        self._log.info(
            "ranking_imported",
            matched=result.matched_count,
            unmatched=result.unmatched_count,
            ambiguous=result.ambiguous_count,
            renumbered=result.reordered or not result.is_contiguous,
        )
        return result

    # ===== Input events =====

    def focus(self, index: int) -> ActionOutcome | None:
        """Focus the ranked value at ``index``."""
        return self._apply_navigation(self._controller.focus(self._state, index))

    def handle_key(self, press: KeyPress) -> bool:
        """Feed a key press to the navigation controller.

        Returns:
            Whether the key was handled.
        """
        result = self._controller.handle_key(self._state, press)
        self._apply_navigation(result)
        return result.handled

    def drag_start(self, index: int) -> None:
        """Pick up the ranked value at ``index``."""
        self._controller.drag_start(self._state, index)

    def drag_over(self) -> None:
        """Hover over a drop target."""
        self._controller.drag_over()

    def drop(self, index: int) -> ActionOutcome | None:
        """Drop the dragged value at ``index``."""
        return self._apply_navigation(self._controller.drop(self._state, index))

    def drag_end(self) -> None:
        """End the drag gesture."""
        self._controller.drag_end()

    def _apply_navigation(self, result: NavigationResult) -> ActionOutcome | None:
        self._commit(result.state)
        if result.outcome is None:
            return None
        return self._report(result.outcome)

    # ===== Internals =====

    def _commit(self, new_state: RankingState) -> bool:
        """Adopt ``new_state`` and write it through.

        Returns:
            False when the state is unchanged (the same object).
        """
        if new_state is self._state:
            return False
        self._state = new_state
        self._controller.sync(new_state)
        self._persist()
        return True

    def _persist(self) -> None:
        ok = self._repository.save(self._state)
        if ok != self._persistence_ok:
            self._log.info("persistence_status_changed", persistence_ok=ok)
        self._persistence_ok = ok

    def _report(self, outcome: ActionOutcome) -> ActionOutcome:
        self._last_outcome = outcome
        self._log.debug("action_outcome", code=outcome.code.value, changed=outcome.changed)
        return outcome
