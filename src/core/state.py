"""
Dashboard State

DashboardState holds the full dataset, the visible subset, the selection
and the marker groups for one session. Every operation returns a new state;
nothing is mutated in place, so a failed step leaves the previous state
intact.

Refreshes are tokenized: begin_refresh() hands out a token and
complete_refresh() drops any response whose token is no longer the latest.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field, replace
from typing import FrozenSet, Optional, Sequence, Tuple

from src.core import selection as sel
from src.core.filters import Criterion, SELECTED, apply_criterion, parse_threshold
from src.core.grouping import LocationGroup, group_by_location
from src.core.schema import ContractRecord, CsvSchema, get_schema

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DashboardState:
    schema_name: str = "v3"
    full_dataset: Tuple[ContractRecord, ...] = ()
    visible: Tuple[ContractRecord, ...] = ()
    selection: FrozenSet[str] = field(default_factory=frozenset)
    criterion: Criterion = field(default_factory=Criterion.all)
    markers: Tuple[LocationGroup, ...] = ()
    source: Optional[str] = None
    last_error: Optional[str] = None
    request_token: int = 0
    applied_token: int = 0
    default_delay_days: Optional[int] = None

    @property
    def schema(self) -> CsvSchema:
        return get_schema(self.schema_name)

    @property
    def contract_nos(self) -> FrozenSet[str]:
        return frozenset(r.contract_no for r in self.full_dataset)


def new_state(schema_name: str = "v3", default_delay_days: Optional[int] = None) -> DashboardState:
    """
    Empty state for a data source shape.

    `default_delay_days` overrides the shape's own default threshold; shapes
    without one (v1) always open on every record.
    """
    schema = get_schema(schema_name)
    if schema.default_delay_days is None:
        default_delay_days = None
    elif default_delay_days is None:
        default_delay_days = schema.default_delay_days
    return DashboardState(schema_name=schema_name, default_delay_days=default_delay_days)


def default_criterion(state: DashboardState) -> Criterion:
    if state.default_delay_days is None:
        return Criterion.all()
    return Criterion.delay_at_least(state.default_delay_days)


def _with_visible(state: DashboardState, criterion: Criterion) -> DashboardState:
    # markers first, then the table reads `visible`; both come from the same subset
    visible = tuple(apply_criterion(state.full_dataset, criterion, state.selection))
    return replace(
        state,
        criterion=criterion,
        visible=visible,
        markers=tuple(group_by_location(visible)),
    )


def load_dataset(
    state: DashboardState,
    records: Sequence[ContractRecord],
    source: Optional[str] = None,
    error: Optional[str] = None,
) -> DashboardState:
    """Replace the full dataset; selection is cleared and the default view applied."""
    fresh = replace(
        state,
        full_dataset=tuple(records),
        selection=frozenset(),
        source=source,
        last_error=error,
    )
    return _with_visible(fresh, default_criterion(state))


def begin_refresh(state: DashboardState) -> Tuple[DashboardState, int]:
    token = state.request_token + 1
    return replace(state, request_token=token), token


def complete_refresh(
    state: DashboardState,
    token: int,
    records: Sequence[ContractRecord],
    source: Optional[str] = None,
    error: Optional[str] = None,
) -> DashboardState:
    """Apply a refresh response only if `token` is the latest one issued."""
    if token != state.request_token:
        logger.debug("Discarding stale refresh %d (latest is %d) for %s", token, state.request_token, source)
        return state
    loaded = load_dataset(state, records, source=source, error=error)
    return replace(loaded, applied_token=token)


def apply_filter(state: DashboardState, criterion: Criterion) -> DashboardState:
    return _with_visible(state, criterion)


def apply_threshold(state: DashboardState, raw) -> DashboardState:
    """
    Apply a user-entered delay threshold.

    Raises FilterValidationError on invalid input; the caller keeps `state`.
    """
    days = parse_threshold(raw)
    return _with_visible(state, Criterion.delay_at_least(days))


def show_selected(state: DashboardState) -> DashboardState:
    return _with_visible(state, Criterion.selected_only())


def _with_selection(state: DashboardState, selection: FrozenSet[str]) -> DashboardState:
    """New selection; the selected-only view is re-derived, other views are left as they are."""
    updated = replace(state, selection=selection)
    if state.criterion.kind == SELECTED:
        return _with_visible(updated, state.criterion)
    return updated


def toggle_selection(state: DashboardState, contract_no: str) -> DashboardState:
    """Toggle one checkbox. Unknown contract numbers are ignored."""
    if contract_no not in state.contract_nos:
        return state
    return _with_selection(state, sel.toggle(state.selection, contract_no))


def set_selected(state: DashboardState, contract_no: str, selected: bool) -> DashboardState:
    if (contract_no in state.selection) == bool(selected):
        return state
    return toggle_selection(state, contract_no)


def select_group(state: DashboardState, group: LocationGroup) -> DashboardState:
    """Marker click: every member of the group becomes selected."""
    known = state.contract_nos
    return _with_selection(
        state,
        sel.select_many(state.selection, (n for n in group.contract_nos if n in known)),
    )


def clear_selection(state: DashboardState) -> DashboardState:
    return _with_selection(state, frozenset())
