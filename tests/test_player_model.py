import pytest
from pydantic import ValidationError

from maddogs.models import PlayerForm, PlayerRecord


def test_player_record_is_frozen():
    record = PlayerRecord(id=1, name="Kim", pa=20, hits=6, double=1, triple=0, homerun=1, walks=4, sb=2, sb_fail=0)

    assert record.id == 1
    assert record.sb_fail == 0

    with pytest.raises((TypeError, ValidationError)):
        record.id = 2  # type: ignore[misc]


def test_missing_or_null_sb_fail_counts_as_zero():
    from_service = PlayerRecord.model_validate(
        {"id": 3, "name": "Lee", "pa": 5, "hits": 1, "double": 0, "triple": 0, "homerun": 0, "walks": 1, "sb": 1, "sb_fail": None}
    )
    omitted = PlayerRecord.model_validate(
        {"id": 4, "name": "Park", "pa": 5, "hits": 1, "double": 0, "triple": 0, "homerun": 0, "walks": 1, "sb": 1}
    )

    assert from_service.sb_fail == 0
    assert omitted.sb_fail == 0


def test_form_defaults_are_zero_valued():
    form = PlayerForm()
    assert form.name == ""
    assert form.model_dump(exclude={"name"}) == {
        "pa": 0,
        "hits": 0,
        "double": 0,
        "triple": 0,
        "homerun": 0,
        "walks": 0,
        "sb": 0,
        "sb_fail": 0,
    }
    assert "id" not in form.to_input().model_dump()
