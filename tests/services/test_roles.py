import pytest

from roblox_visits.schemas.visits import GroupMembership
from roblox_visits.services.roles import developer_memberships, is_developer_role


@pytest.mark.parametrize(
    "role",
    ["Co-Owner", "LEAD SCRIPTER", "Owner", "Head Developer", "builder", "Senior Programmer", "Dev Team"],
)
def test_developer_roles_match(role):
    assert is_developer_role(role)


@pytest.mark.parametrize("role", ["Moderator", "Member", "Guest", "Fan", ""])
def test_other_roles_do_not_match(role):
    assert not is_developer_role(role)


def test_missing_role_name_is_not_developer():
    assert not is_developer_role(None)


def test_developer_memberships_filters():
    rows = [
        {"group": {"id": 1, "name": "Studio"}, "role": {"name": "Lead Developer"}},
        {"group": {"id": 2, "name": "Fan Club"}, "role": {"name": "Moderator"}},
        {"group": {"id": 3, "name": "Builds"}, "role": {"name": "builder"}},
    ]
    assert developer_memberships(rows) == [
        GroupMembership(group_id=1, group_name="Studio", role_name="Lead Developer"),
        GroupMembership(group_id=3, group_name="Builds", role_name="builder"),
    ]


def test_skipped_row_group_is_not_read():
    rows = [
        {"group": None, "role": {"name": "Member"}},
        {"group": {"id": 7}, "role": {"name": "Owner"}},
    ]
    assert [m.group_id for m in developer_memberships(rows)] == [7]


@pytest.mark.parametrize("row", [{"group": {"id": 7}}, {"group": {"id": 7}, "role": None}])
def test_row_without_role_raises(row):
    with pytest.raises((KeyError, TypeError)):
        developer_memberships([row])
