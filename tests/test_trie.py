"""
Tests for the path trie.
"""

import logging

import pytest

from pathminer.kg.models import Direction, Entity, Fact, NERTag
from pathminer.mining.path import Path
from pathminer.mining.trie import PathTrie, TrieExtensionError


class TestPathTrie:
    """Test PathTrie construction and extension rules."""

    @pytest.fixture
    def julie(self, people):
        return people["julie"]

    @pytest.fixture
    def arun(self, people):
        return people["arun"]

    @pytest.fixture
    def trie(self, julie):
        return PathTrie(julie, 3)

    @pytest.fixture
    def chain(self, trie, julie, arun, canada):
        """julie -r-> canada <-r- arun"""
        u = trie.extend(PathTrie.ROOT, Fact(julie, canada, "r"))
        v = trie.extend(u, Fact(arun, canada, "r"))
        return u, v

    def test_constructor(self, trie, julie):
        root = trie.node(PathTrie.ROOT)
        assert root.entry == julie
        assert root.parent is None
        assert root.relation_from_parent is None
        assert root.children == {}
        assert trie.root() == julie
        assert len(trie) == 1

    def test_simple_extend(self, trie, chain, arun, canada):
        u, v = chain
        assert u is not None and v is not None
        assert trie.node(u).entry == canada
        assert trie.node(u).relation_from_parent == ("r", Direction.FORWARD)
        assert trie.node(v).entry == arun
        assert trie.node(v).relation_from_parent == ("r", Direction.BACKWARD)
        assert trie.node(v).parent == u

    def test_depth(self, trie, chain):
        u, v = chain
        assert trie.depth(PathTrie.ROOT) == 0
        assert trie.depth(u) == 1
        assert trie.depth(v) == 2

    def test_is_loop(self, trie, chain, julie, arun):
        u, v = chain
        assert not trie.is_loop(PathTrie.ROOT)
        assert not trie.is_loop(u)
        loop_parent = trie.extend(v, Fact(arun, Entity("Percy", NERTag.PERSON), "r"))
        assert not trie.is_loop(loop_parent)

        assert trie.extend(v, Fact(arun, julie, "r")) is None
        loop = trie.node(v).children[("r", Direction.FORWARD, julie)]
        assert trie.is_loop(loop)

    def test_dangling_loop(self, trie, chain, people, canada):
        u, v = chain
        assert not trie.dangling_loop(PathTrie.ROOT, canada)
        assert not trie.dangling_loop(PathTrie.ROOT, people["julie"])
        assert not trie.dangling_loop(u, people["arun"])
        assert not trie.dangling_loop(u, people["julie"])
        assert not trie.dangling_loop(v, people["chris"])
        assert not trie.dangling_loop(v, people["julie"])
        assert trie.dangling_loop(v, canada)

    def test_disallow_dangling_loops(self, trie, chain, arun, canada):
        _, v = chain
        assert trie.extend(v, Fact(arun, canada, "r")) is None
        assert trie.extend(v, Fact(canada, arun, "r")) is None
        assert trie.node(v).children == {}

    def test_disallow_backtracking(self, trie, chain, julie, canada):
        u, _ = chain
        children_before = dict(trie.node(u).children)

        assert trie.extend(u, Fact(julie, canada, "r")) is None
        assert trie.node(u).children == children_before

        # a different relation back to the root is a genuine loop
        assert trie.extend(u, Fact(canada, julie, "s")) is None
        assert len(trie.node(u).children) == len(children_before) + 1
        assert trie.extend(u, Fact(julie, canada, "s")) is None
        assert len(trie.node(u).children) == len(children_before) + 2

    def test_reflexive_loops(self, julie, canada):
        trie = PathTrie(julie, 3)
        u = trie.extend(PathTrie.ROOT, Fact(julie, canada, "r"))
        # same relation, opposite direction: a different fact, so not a backtrack
        assert trie.extend(u, Fact(canada, julie, "r")) is None
        (loop,) = trie.node(u).children.values()
        assert trie.is_loop(loop)

    def test_closed_loops_not_extended(self, trie, chain, julie, arun):
        _, v = chain
        assert trie.extend(v, Fact(arun, julie, "r")) is None
        assert len(trie.node(v).children) == 1
        assert trie.extend(v, Fact(julie, arun, "r")) is None
        assert len(trie.node(v).children) == 2
        for child in trie.node(v).children.values():
            assert trie.node(child).children == {}

    def test_max_depth(self, trie, chain, people, stanford):
        _, v = chain
        w = trie.extend(v, Fact(people["arun"], people["gabor"], "r"))
        assert w is not None
        assert trie.depth(w) == 3
        assert trie.extend(w, Fact(people["gabor"], stanford, "r")) is None
        assert trie.node(w).children == {}

    def test_loops_may_exceed_max_depth(self, julie, canada):
        trie = PathTrie(julie, 1)
        u = trie.extend(PathTrie.ROOT, Fact(julie, canada, "r"))
        assert u is not None
        assert trie.extend(u, Fact(canada, julie, "s")) is None
        (loop,) = trie.node(u).children.values()
        assert trie.depth(loop) == 2
        assert trie.is_loop(loop)

    def test_duplicate_extension(self, trie, chain, people, canada):
        u, _ = chain
        fact = Fact(people["chris"], canada, "r")
        assert trie.extend(u, fact) is not None
        size = len(trie)
        assert trie.extend(u, fact) is None
        assert len(trie) == size

    def test_unrelated_fact_raises(self, trie, chain, people):
        u, _ = chain
        with pytest.raises(TrieExtensionError):
            trie.extend(u, Fact(people["arun"], people["gabor"], "r"))

    def test_as_path(self, trie, chain, people, canada):
        _, v = chain
        w = trie.extend(v, Fact(people["arun"], people["gabor"], "r"))
        path = trie.as_path(w)
        assert path.root == people["julie"]
        assert path.facts == (
            Fact(people["julie"], canada, "r"),
            Fact(people["arun"], canada, "r"),
            Fact(people["arun"], people["gabor"], "r"),
        )
        assert path.walk() == [people["julie"], canada, people["arun"], people["gabor"]]

    def test_all_paths(self, trie, chain, people, canada):
        u, v = chain
        w1 = trie.extend(v, Fact(people["arun"], people["gabor"], "r"))
        w2 = trie.extend(u, Fact(people["chris"], canada, "r"))

        paths = trie.all_paths()
        assert len(paths) == 4
        assert set(paths) == {trie.as_path(node) for node in (u, v, w1, w2)}
        assert set(trie.all_paths(v)) == {trie.as_path(v), trie.as_path(w1)}
        assert all(path.root == people["julie"] for path in paths)

    def test_render(self, trie, chain):
        text = trie.render()
        assert text.startswith("Julie:PER")
        assert "-[r]-> Canada:CRY" in text
        assert "<-[r]- Arun:PER" in text


class TestNameFallback:
    """Test matching trie entries to fact endpoints by name."""

    @pytest.fixture
    def homonym(self):
        return Entity("Canada", NERTag.LOCATION)

    def test_fallback_warns_and_extends(self, people, canada, homonym, caplog):
        trie = PathTrie(people["julie"], 3)
        u = trie.extend(PathTrie.ROOT, Fact(people["julie"], canada, "r"))

        with caplog.at_level(logging.WARNING, logger="pathminer.mining.trie"):
            child = trie.extend(u, Fact(people["arun"], homonym, "s"))

        assert child is not None
        assert trie.node(child).entry == people["arun"]
        assert trie.node(child).relation_from_parent == ("s", Direction.BACKWARD)
        assert any("by name only" in record.message for record in caplog.records)
        # the path is expressed in terms of the trie's own entities
        assert trie.as_path(child).facts[-1] == Fact(people["arun"], canada, "s")

    def test_fallback_disabled_raises(self, people, canada, homonym):
        trie = PathTrie(people["julie"], 3, name_fallback=False)
        u = trie.extend(PathTrie.ROOT, Fact(people["julie"], canada, "r"))
        with pytest.raises(TrieExtensionError):
            trie.extend(u, Fact(people["arun"], homonym, "s"))


class TestPath:
    """Test Path helpers."""

    def test_walk_and_loop(self, triangle):
        _, (x, y, z), facts = triangle
        path = Path(root=x, facts=tuple(facts))
        assert path.walk() == [x, y, z, x]
        assert path.is_loop
        assert not Path(root=x, facts=tuple(facts[:2])).is_loop
        assert not Path(root=x, facts=()).is_loop
        assert path.entity_names() == frozenset({"X", "Y", "Z"})

    def test_broken_walk(self, triangle):
        _, (x, _, _), facts = triangle
        with pytest.raises(ValueError):
            Path(root=x, facts=(facts[1],)).walk()

    def test_equality_ignores_root(self, triangle):
        _, (x, y, _), facts = triangle
        assert Path(root=x, facts=(facts[0],)) == Path(root=y, facts=(facts[0],))
        assert len({Path(root=x, facts=(facts[0],)), Path(root=y, facts=(facts[0],))}) == 1
