"""Tests for the cleanup target catalog."""

from tidymac.targets import (
    CATEGORY_ORDER,
    DEFAULT_TARGETS,
    get_default_targets,
    get_target,
    group_by_category,
    has_selection,
)


class TestCatalog:
    def test_catalog_not_empty(self):
        assert len(DEFAULT_TARGETS) > 0

    def test_ids_unique(self):
        ids = [t.id for t in DEFAULT_TARGETS]
        assert len(ids) == len(set(ids))

    def test_all_targets_have_required_fields(self):
        for target in DEFAULT_TARGETS:
            assert target.name
            assert target.description
            assert target.category in CATEGORY_ORDER
            if target.is_command:
                assert target.command, f"{target.id} is command-based but has no command"
            else:
                assert target.path, f"{target.id} has no path"

    def test_command_targets(self):
        brew = get_target(DEFAULT_TARGETS, "homebrew_cache")
        assert brew.is_command
        assert brew.command == "brew cleanup"

        tm = get_target(DEFAULT_TARGETS, "time_machine_local")
        assert tm.is_command
        assert tm.requires_sudo

    def test_system_paths_need_sudo(self):
        assert get_target(DEFAULT_TARGETS, "system_caches").requires_sudo
        assert get_target(DEFAULT_TARGETS, "system_logs").requires_sudo
        assert not get_target(DEFAULT_TARGETS, "user_caches").requires_sudo


class TestGetDefaultTargets:
    def test_returns_copies(self):
        targets = get_default_targets()
        targets[0].selected = True
        targets[0].size = 123

        assert not DEFAULT_TARGETS[0].selected
        assert DEFAULT_TARGETS[0].size == 0

    def test_same_length(self):
        assert len(get_default_targets()) == len(DEFAULT_TARGETS)


class TestLookup:
    def test_get_target_exists(self):
        target = get_target(get_default_targets(), "npm_cache")
        assert target is not None
        assert target.id == "npm_cache"

    def test_get_target_missing(self):
        assert get_target(get_default_targets(), "nonexistent") is None


class TestGrouping:
    def test_groups_follow_category_order(self):
        grouped = group_by_category(get_default_targets())
        categories = list(grouped)
        assert categories == [c for c in CATEGORY_ORDER if c in grouped]

    def test_every_target_grouped(self):
        targets = get_default_targets()
        grouped = group_by_category(targets)
        assert sum(len(v) for v in grouped.values()) == len(targets)


class TestHasSelection:
    def test_no_selection(self):
        assert not has_selection(get_default_targets())

    def test_with_selection(self):
        targets = get_default_targets()
        targets[3].selected = True
        assert has_selection(targets)
