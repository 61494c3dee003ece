"""Shared fixtures for the contract dashboard tests."""

from __future__ import annotations

import pytest

from src.core.schema import ContractRecord


def _make_record(no, lat=37.1, lon=127.1, delay="0", toner=None, viko=None, **kw) -> ContractRecord:
    return ContractRecord(
        contract_no=no,
        company_name=kw.get("company", f"Company {no}"),
        address=kw.get("address", f"Seoul {no}"),
        rental_machine=kw.get("machine", "Copier"),
        delay_days=delay,
        latitude=lat,
        longitude=lon,
        toner_check=toner,
        viko_check=viko,
    )


@pytest.fixture
def make_record():
    return _make_record


@pytest.fixture
def three_records():
    """Two contracts share a location, one stands alone."""
    return [
        _make_record("A", 37.1, 127.1, delay="10"),
        _make_record("B", 37.1, 127.1, delay="abc"),
        _make_record("C", 37.2, 127.2, delay="120"),
    ]


@pytest.fixture
def v3_csv():
    return (
        "no,company,address,machine,delay,lat,lon,toner,viko\n"
        'C-001,Acme,"Seoul, Jung-gu",MX-3050,120,37.5665,126.9780,1,0\n'
        'C-002,"Beta, Inc",Busan,MX-2651,45,35.1796,129.0756,0,1\n'
        "C-003,Gamma,Seoul,MX-3050,95,37.5665,126.9780,1,1\n"
        "C-004,Delta,Unknown,MX-4071,abc,,,x,\n"
    )

