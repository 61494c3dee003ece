"""
Checkbox selection tracking.

Selection is a set of contract numbers kept beside the dataset; it never
mutates records. All helpers return new frozensets.
"""

from typing import FrozenSet, Iterable, List, Sequence

from src.core.schema import ContractRecord


def is_selected(selection: FrozenSet[str], record: ContractRecord) -> bool:
    return record.contract_no in selection


def toggle(selection: FrozenSet[str], contract_no: str) -> FrozenSet[str]:
    """Flip one contract number in or out of the selection."""
    if contract_no in selection:
        return selection - {contract_no}
    return selection | {contract_no}


def select_many(selection: FrozenSet[str], contract_nos: Iterable[str]) -> FrozenSet[str]:
    """Add contract numbers; already-selected ones stay selected."""
    return selection | frozenset(contract_nos)


def order_selected_first(records: Sequence[ContractRecord], selection: FrozenSet[str]) -> List[ContractRecord]:
    """Stable partition: selected rows first, then the rest, each in input order."""
    return sorted(records, key=lambda r: r.contract_no not in selection)
