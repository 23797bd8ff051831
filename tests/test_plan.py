"""Tests for the install plan ordering contract."""

from dust.modules.plan import InstallPlan


class TestInstallPlan:
    def test_keeps_discovery_order_and_ignores_duplicates(self):
        plan = InstallPlan(["x", "y", "x"])
        assert list(plan) == ["x", "y"]
        assert len(plan) == 2
        assert "y" in plan

    def test_tree_installs_in_reverse_discovery_order(self):
        # x -> a -> c, x -> b
        plan = InstallPlan(["x", "a", "c", "b"])
        plan.add_edge("x", "a")
        plan.add_edge("a", "c")
        plan.add_edge("x", "b")
        assert plan.install_order() == ["b", "c", "a", "x"]

    def test_diamond_puts_shared_dependency_first(self):
        # x -> a -> c, x -> b -> c ; c discovered under a only
        plan = InstallPlan(["x", "a", "c", "b"])
        for dependent, dependency in [("x", "a"), ("a", "c"), ("x", "b"), ("b", "c")]:
            plan.add_edge(dependent, dependency)
        order = plan.install_order()
        assert order.index("c") < order.index("b")
        assert order.index("c") < order.index("a")
        assert order[-1] == "x"

    def test_cycle_falls_back_to_reverse_discovery(self):
        plan = InstallPlan(["a", "b"])
        plan.add_edge("a", "b")
        plan.add_edge("b", "a")
        assert plan.install_order() == ["b", "a"]

    def test_edges_to_unplanned_packages_are_ignored(self):
        plan = InstallPlan(["a"])
        plan.add_edge("a", "not-planned")
        assert plan.dependencies_of("a") == set()
        assert plan.install_order() == ["a"]

    def test_remove_drops_edges(self):
        plan = InstallPlan(["a", "b"])
        plan.add_edge("a", "b")
        plan.remove("b")
        assert list(plan) == ["a"]
        assert plan.dependencies_of("a") == set()

    def test_extend_merges_entries_and_edges(self):
        first = InstallPlan(["a"])
        second = InstallPlan(["b", "c"])
        second.add_edge("b", "c")
        first.extend(second)
        assert list(first) == ["a", "b", "c"]
        assert first.dependencies_of("b") == {"c"}

    def test_empty_plan_is_falsy(self):
        assert not InstallPlan()
        assert InstallPlan().install_order() == []
