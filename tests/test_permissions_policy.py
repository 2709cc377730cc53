"""
Tests for the permission policy tables.
"""
import pytest

from app.permissions.models import ActionKind, QuotaTier, User, UnknownActionError
from app.permissions.policy import PolicyTable, MIN_REPUTATIONS, MAX_LIMIT, default_limitations


class TestTiers:
    """Test reputation tier selection."""

    def setup_method(self):
        self.policy = PolicyTable()

    @pytest.mark.parametrize("reputation,tier", [
        (-1000, QuotaTier.NEGATIVE),
        (-1, QuotaTier.NEGATIVE),
        (0, QuotaTier.NEW_USER),
        (42, QuotaTier.NEW_USER),
        (50, QuotaTier.NEW_USER),
        (51, QuotaTier.CONFIRMED),
        (10000, QuotaTier.CONFIRMED),
    ])
    def test_tier_index(self, reputation, tier):
        assert self.policy.tier_index(reputation) == tier

    def test_custom_threshold(self):
        policy = PolicyTable(confirmed_user_threshold=100)
        assert policy.tier_index(75) == QuotaTier.NEW_USER
        assert policy.tier_index(101) == QuotaTier.CONFIRMED

    def test_limits_are_monotonic_in_reputation(self):
        """Moving up a tier never lowers a limit."""
        for action in ActionKind:
            negative = self.policy.limitation(User(id=1, reputation=-10), action)
            new_user = self.policy.limitation(User(id=1, reputation=10), action)
            confirmed = self.policy.limitation(User(id=1, reputation=100), action)
            assert negative <= new_user <= confirmed, action


class TestLookups:
    """Test table lookups."""

    def setup_method(self):
        self.policy = PolicyTable()

    def test_every_action_has_entries(self):
        assert set(MIN_REPUTATIONS) == set(ActionKind)
        assert set(default_limitations()) == set(ActionKind)

    def test_min_reputation(self):
        assert self.policy.min_reputation(ActionKind.FLAG_COMMENT) == 40
        assert self.policy.min_reputation("add_comment") == -25
        assert self.policy.min_reputation("approve_history_action") == 0
        assert self.policy.min_reputation("eat_unicorn") is None

    def test_limitation(self):
        user = User(id=1, reputation=42)
        assert self.policy.limitation(user, ActionKind.FLAG_COMMENT) == 1
        assert self.policy.limitation(User(id=1, reputation=-5), ActionKind.ADD_COMMENT) == 3
        assert self.policy.limitation(User(id=1, reputation=60), ActionKind.ADD_SPEAKER) == 50
        assert self.policy.limitation(User(id=1, reputation=60), ActionKind.VOTE_UP) == MAX_LIMIT

    def test_limitation_unknown_action(self):
        with pytest.raises(UnknownActionError):
            self.policy.limitation(User(id=1, reputation=42), "eat_unicorn")

    def test_introspection_tables(self):
        limitations = self.policy.limitations()
        assert limitations["add_video"] == (0, 3, 10)
        assert self.policy.min_reputations()["vote_down"] == 80

        # Copies, the policy itself can't be changed
        limitations["add_video"] = (9, 9, 9)
        assert self.policy.limitations()["add_video"] == (0, 3, 10)

    def test_to_dict(self):
        data = self.policy.to_dict()
        assert data["confirmed_user_threshold"] == 50
        assert data["max_limit"] == 100
        assert data["limitations"]["flag_comment"] == [0, 1, 100]


class TestFromConfig:
    """Test building a policy from configuration."""

    def test_max_limit(self):
        policy = PolicyTable.from_config(max_limit=500)
        assert policy.limitation(User(id=1, reputation=100), ActionKind.ADD_COMMENT) == 500
        # Fixed values are untouched
        assert policy.limitation(User(id=1, reputation=100), ActionKind.ADD_VIDEO) == 10

    def test_override(self):
        policy = PolicyTable.from_config(limitation_overrides={"add_video": [1, 5, 20]})
        assert policy.limitations()["add_video"] == (1, 5, 20)

    def test_unknown_action_override(self):
        with pytest.raises(ValueError, match="eat_unicorn"):
            PolicyTable.from_config(limitation_overrides={"eat_unicorn": [0, 1, 2]})

    @pytest.mark.parametrize("value", [[1, 2], [1, 2, -3], "123", [1, 2, 3.5], [True, 1, 2]])
    def test_malformed_override(self, value):
        with pytest.raises(ValueError):
            PolicyTable.from_config(limitation_overrides={"add_video": value})


class TestTableValidation:
    """Test that both policy tables cover the same actions."""

    def test_limit_without_floor(self):
        with pytest.raises(ValueError, match="flag_comment"):
            PolicyTable(limitations={ActionKind.ADD_COMMENT: (3, 10, 100)})

    def test_floor_without_limit(self):
        with pytest.raises(ValueError, match="vote_down"):
            PolicyTable(
                min_reputations={ActionKind.ADD_COMMENT: -25, ActionKind.VOTE_DOWN: 80},
                limitations={ActionKind.ADD_COMMENT: (3, 10, 100)},
            )

    def test_matching_partial_tables(self):
        policy = PolicyTable(
            min_reputations={ActionKind.ADD_COMMENT: -25},
            limitations={"add_comment": [3, 10, 100]},
        )
        assert policy.limitations() == {"add_comment": (3, 10, 100)}
        assert policy.min_reputation(ActionKind.FLAG_COMMENT) is None
        assert not policy.is_known(ActionKind.FLAG_COMMENT)

    def test_empty_tables_are_kept(self):
        policy = PolicyTable(min_reputations={}, limitations={})
        assert policy.min_reputation(ActionKind.ADD_COMMENT) is None
        assert policy.limitations() == {}

    @pytest.mark.parametrize("value", [(1, 2), (1, 2, -3), (1, 2, 3.5)])
    def test_malformed_limitation(self, value):
        with pytest.raises(ValueError, match="add_comment"):
            PolicyTable(
                min_reputations={ActionKind.ADD_COMMENT: -25},
                limitations={ActionKind.ADD_COMMENT: value},
            )

    def test_unknown_action_key(self):
        with pytest.raises(ValueError, match="eat_unicorn"):
            PolicyTable(min_reputations={"eat_unicorn": 0}, limitations={"eat_unicorn": (0, 0, 0)})

    def test_unknown_action_error_message(self):
        error = UnknownActionError(ActionKind.FLAG_COMMENT)
        assert error.action == "flag_comment"
        assert str(error) == "unknown action: flag_comment"
        assert str(UnknownActionError("eat_unicorn")) == "unknown action: eat_unicorn"
