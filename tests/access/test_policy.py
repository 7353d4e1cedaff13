from src.edutrack.edutrack.access.policy import AccessScope, can_access_center, scope_for


def test_admin_can_access_any_center(admin):
    assert can_access_center(admin, "center-north")
    assert can_access_center(admin, "anything")


def test_coordinator_limited_to_assigned_center(north):
    assert can_access_center(north, "center-north")
    assert not can_access_center(north, "center-south")


def test_coordinator_without_center_has_no_access(unassigned):
    assert not can_access_center(unassigned, "center-north")
    assert not can_access_center(unassigned, "")


def test_scopes(admin, north, unassigned):
    assert scope_for(admin) == AccessScope(global_access=True)
    assert scope_for(north) == AccessScope(global_access=False, center_id="center-north")
    assert not scope_for(north).is_empty
    assert scope_for(unassigned).is_empty
