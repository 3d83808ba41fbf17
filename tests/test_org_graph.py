"""
Tests for organization graph resolution.

Covers:
- Team resolution along a leader chain
- Pending users excluded from the chart
- Admin/master visibility
- Cycle tolerance in traversal and cycle detection on write
"""

from conftest import make_user

from salesnet.models import UserRole, UserStatus
from salesnet.services.org_graph import (
    build_org_chart,
    direct_members,
    resolve_team,
    team_members,
    visible_user_ids,
    would_create_cycle,
)


def _chain():
    # A <- B <- C, D pending under B
    return [
        make_user("a"),
        make_user("b", leader_id="a"),
        make_user("c", leader_id="b"),
        make_user("d", leader_id="b", status=UserStatus.PENDING),
    ]


class TestResolveTeam:
    def test_chain_from_root(self):
        assert resolve_team("a", _chain()) == {"a", "b", "c"}

    def test_chain_from_middle(self):
        assert resolve_team("b", _chain()) == {"b", "c"}

    def test_leaf_is_alone(self):
        assert resolve_team("c", _chain()) == {"c"}

    def test_pending_user_excluded(self):
        assert "d" not in resolve_team("a", _chain())

    def test_unknown_user_resolves_to_itself(self):
        assert resolve_team("ghost", _chain()) == {"ghost"}


class TestTeamMembers:
    def test_depth_first_order(self):
        users = [
            make_user("root"),
            make_user("x", leader_id="root"),
            make_user("y", leader_id="root"),
            make_user("x1", leader_id="x"),
        ]
        assert [u.id for u in team_members("root", users)] == ["x", "x1", "y"]

    def test_root_not_included(self):
        ids = [u.id for u in team_members("a", _chain())]
        assert "a" not in ids

    def test_cycle_terminates(self):
        users = [
            make_user("p", leader_id="q"),
            make_user("q", leader_id="p"),
        ]
        assert [u.id for u in team_members("p", users)] == ["q"]
        assert resolve_team("q", users) == {"p", "q"}

    def test_chart_reused(self):
        users = _chain()
        chart = build_org_chart(users)
        assert team_members("a", users, chart) == team_members("a", users)


class TestDirectMembers:
    def test_only_first_level(self):
        assert [u.id for u in direct_members("a", _chain())] == ["b"]

    def test_pending_skipped(self):
        assert [u.id for u in direct_members("b", _chain())] == ["c"]


class TestVisibleUserIds:
    def test_commercial_sees_subtree(self):
        users = _chain()
        assert visible_user_ids(users[1], users) == {"b", "c"}

    def test_admin_sees_all_approved(self):
        admin = make_user("admin", role=UserRole.ADMIN)
        users = _chain() + [admin]
        assert visible_user_ids(admin, users) == {"a", "b", "c", "admin"}


class TestWouldCreateCycle:
    def test_leader_below_user(self):
        # Making C the leader of A closes A <- B <- C <- A
        assert would_create_cycle("a", "c", _chain()) is True

    def test_self_leader(self):
        assert would_create_cycle("a", "a", _chain()) is True

    def test_sibling_branch_is_fine(self):
        users = _chain() + [make_user("e")]
        assert would_create_cycle("e", "c", users) is False

    def test_no_leader(self):
        assert would_create_cycle("a", None, _chain()) is False
