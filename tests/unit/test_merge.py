"""Unit tests for deep merge and environment overlay."""

from bento.utils.merge import apply_environment, deep_merge


class TestDeepMerge:
    """Test deep merge semantics."""

    def test_nested_merge(self):
        """Test nested mappings merge key by key."""
        result = deep_merge({"a": 1, "b": {"c": 2}}, {"b": {"d": 3}})

        assert result == {"a": 1, "b": {"c": 2, "d": 3}}

    def test_override_wins(self):
        """Test scalar conflicts take the override side."""
        assert deep_merge({"a": 1}, {"a": 2}) == {"a": 2}

    def test_lists_replaced(self):
        """Test lists are replaced wholesale."""
        assert deep_merge({"a": [1, 2]}, {"a": [3]}) == {"a": [3]}

    def test_mapping_replaces_scalar(self):
        """Test type mismatches take the override side."""
        assert deep_merge({"a": 1}, {"a": {"b": 2}}) == {"a": {"b": 2}}

    def test_inputs_not_mutated(self):
        """Test neither input changes and nested dicts are not shared."""
        base = {"a": {"b": 1}}
        override = {"a": {"c": 2}}

        result = deep_merge(base, override)
        result["a"]["b"] = 99

        assert base == {"a": {"b": 1}}
        assert override == {"a": {"c": 2}}

    def test_none_override(self):
        """Test a missing override copies the base."""
        assert deep_merge({"a": 1}, None) == {"a": 1}


class TestApplyEnvironment:
    """Test environment overlay."""

    def test_overlay(self):
        """Test the environment section overrides matching keys."""
        config = {"server": {"port": 3001, "host": "0.0.0.0"}, "production": {"server": {"port": 80}}}

        result = apply_environment(config, "production")

        assert result["server"] == {"port": 80, "host": "0.0.0.0"}
        assert result["production"] == {"server": {"port": 80}}

    def test_missing_environment(self):
        """Test an absent section leaves the mapping unchanged."""
        config = {"server": {"port": 3001}}

        assert apply_environment(config, "staging") == config
        assert apply_environment(config, None) == config

    def test_adds_new_keys(self):
        """Test keys only present in the environment section are added."""
        result = apply_environment({"development": {"debug": True}}, "development")

        assert result["debug"] is True
