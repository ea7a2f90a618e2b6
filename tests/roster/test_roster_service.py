from datetime import datetime

import pytest

from src.sewa_duty.sewa_duty.core.enums import Gender, HomeGroup
from src.sewa_duty.sewa_duty.core.exceptions import ValidationError
from src.sewa_duty.sewa_duty.roster.model import Sewadar
from src.sewa_duty.sewa_duty.roster.service import RosterService

NOW = datetime(2026, 2, 1, 19, 0)


@pytest.fixture
def service(repos):
    return RosterService(repos.roster)


def test_search_by_name_ignores_group_filter(service):
    names = [s.name for s in service.search("an", group=HomeGroup.LADIES)]
    assert names == ["Anil Gulati", "Charan Das"]


def test_empty_search_filters_by_group_and_gender(service):
    assert [s.sewadar_id for s in service.search(group=HomeGroup.MONDAY)] == ["MON-001", "MON-002"]
    assert [s.sewadar_id for s in service.search(gender=Gender.LADIES)] == ["LAD-001"]
    assert service.search("kaur", gender=Gender.GENTS) == []


def test_present_dedups_and_skips_unknown(service):
    present = service.present(["MON-002", "MON-001", "MON-002", "GONE"])
    assert [s.sewadar_id for s in present] == ["MON-001", "MON-002"]


def test_register_custom_sewadar(service, repos):
    version = repos.roster.version
    s = service.register_custom(name=" Dev Raj ", gender="Gents", group="Friday", now=NOW)

    assert s.sewadar_id == f"ADDED-{int(NOW.timestamp() * 1000)}"
    assert s.name == "Dev Raj"
    assert s.is_custom
    assert service.get(s.sewadar_id) == s
    assert repos.roster.version == version + 1

    again = service.register_custom(name="Dev Raj", gender="Gents", group="Friday", now=NOW)
    assert again.sewadar_id == f"{s.sewadar_id}-1"


@pytest.mark.parametrize(
    "gender, group",
    [("Ladies", "Monday"), ("Gents", "Ladies"), ("Other", "Monday"), ("Gents", "Someday")],
)
def test_register_custom_validates_group(service, gender, group):
    with pytest.raises(ValidationError):
        service.register_custom(name="X", gender=gender, group=group, now=NOW)


def test_register_custom_requires_name(service):
    with pytest.raises(ValidationError):
        service.register_custom(name=" ", gender="Gents", group="Monday", now=NOW)


def test_roster_rejects_duplicate_ids(repos):
    with pytest.raises(ValidationError):
        repos.roster.add(Sewadar("MON-001", "Someone", Gender.GENTS, HomeGroup.MONDAY))
