"""
Tests for the entity graph, its JSON store and the knowledge base loader.
"""

import json

import pytest

from pathminer.kb.knowledge_base import KnowledgeBase, load_knowledge_base
from pathminer.kb.models import KnownFact
from pathminer.kg.entity_graph import EntityGraph, GraphPreconditionError
from pathminer.kg.graph_store import GraphStore, load_graph
from pathminer.kg.models import Direction, Entity, Fact, NERTag


class TestModels:
    """Test entity and fact models."""

    def test_ner_tag_from_string(self):
        assert NERTag.from_string("person") == NERTag.PERSON
        assert NERTag.from_string("ORG") == NERTag.ORGANIZATION
        assert NERTag.from_string("CRY") == NERTag.COUNTRY
        assert NERTag.from_string("spaceship") is None
        assert NERTag.from_string("") is None

    def test_entity_identity_uses_name_and_type(self):
        assert Entity("Canada", NERTag.COUNTRY) == Entity("Canada", NERTag.COUNTRY)
        assert Entity("Canada", NERTag.COUNTRY) != Entity("Canada", NERTag.LOCATION)

    def test_fact_score_defaults_to_one(self, people, canada):
        fact = Fact(people["julie"], canada, "per:country_of_birth")
        assert fact.confidence is None
        assert fact.score == 1.0
        assert Fact(people["julie"], canada, "r", 0.4).score == 0.4

    def test_fact_equality_ignores_confidence(self, people, canada):
        assert Fact(people["julie"], canada, "r", 0.2) == Fact(people["julie"], canada, "r", 0.9)
        assert Fact(people["julie"], canada, "r") != Fact(people["julie"], canada, "s")

    def test_fact_rejects_out_of_range_confidence(self, people, canada):
        with pytest.raises(ValueError):
            Fact(people["julie"], canada, "r", 1.5)

    def test_direction_reverse(self):
        assert Direction.FORWARD.reverse() == Direction.BACKWARD
        assert Direction.BACKWARD.reverse() == Direction.FORWARD


class TestEntityGraph:
    """Test EntityGraph functionality."""

    @pytest.fixture
    def graph(self, people, stanford):
        graph = EntityGraph()
        graph.add_vertex(people["julie"])
        graph.add_vertex(people["arun"])
        graph.add_vertex(stanford)
        return graph

    def test_add_fact_requires_vertices(self, graph, people, stanford):
        with pytest.raises(GraphPreconditionError):
            graph.add_fact(Fact(people["gabor"], stanford, "per:employee_or_member_of"))

    def test_add_adds_missing_vertices(self, people, stanford):
        graph = EntityGraph()
        fact = Fact(people["gabor"], stanford, "per:employee_or_member_of")
        graph.add(people["gabor"], stanford, fact)
        assert graph.contains_vertex(people["gabor"])
        assert stanford in graph
        assert graph.fact_count == 1

    def test_add_rejects_mismatched_endpoints(self, people, stanford):
        graph = EntityGraph()
        with pytest.raises(GraphPreconditionError):
            graph.add(people["julie"], stanford, Fact(people["arun"], stanford, "r"))

    def test_incident_facts(self, graph, people, stanford):
        works = Fact(people["julie"], stanford, "per:employee_or_member_of")
        sibling = Fact(people["arun"], people["julie"], "per:siblings")
        graph.add_fact(works)
        graph.add_fact(sibling)

        assert graph.outgoing(people["julie"]) == [works]
        assert graph.incoming(people["julie"]) == [sibling]
        assert graph.incoming(stanford) == [works]
        assert graph.outgoing(stanford) == []
        assert graph.outgoing(Entity("Nobody", NERTag.PERSON)) == []

    def test_multigraph_keeps_parallel_facts(self, graph, people, stanford):
        graph.add_fact(Fact(people["julie"], stanford, "per:employee_or_member_of"))
        graph.add_fact(Fact(people["julie"], stanford, "per:schools_attended"))
        relations = [fact.relation for fact in graph.edges_between(people["julie"], stanford)]
        assert relations == ["per:employee_or_member_of", "per:schools_attended"]
        assert graph.edges_between(stanford, people["julie"]) == []

    def test_edge_cursor_removes_last_fact(self, graph, people, stanford):
        graph.add_fact(Fact(people["julie"], stanford, "keep"))
        graph.add_fact(Fact(people["arun"], stanford, "drop"))
        graph.add_fact(Fact(people["julie"], stanford, "drop"))

        cursor = graph.edge_iterator()
        for fact in cursor:
            if fact.relation == "drop":
                cursor.remove()

        assert [fact.relation for fact in graph.facts()] == ["keep"]
        assert graph.vertex_count == 3

    def test_edge_cursor_remove_without_next(self, graph):
        cursor = graph.edge_iterator()
        with pytest.raises(RuntimeError):
            cursor.remove()

    def test_remove_fact(self, graph, people, stanford):
        fact = Fact(people["julie"], stanford, "per:employee_or_member_of")
        graph.add_fact(fact)
        assert graph.remove_fact(fact)
        assert not graph.remove_fact(fact)
        assert graph.fact_count == 0

    def test_name_index_ignores_type(self, graph, people):
        homonym = Entity("Stanford", NERTag.CITY)
        graph.add_vertex(homonym)
        index = graph.name_index()
        assert index["Julie"] == people["julie"]
        assert index["Stanford"] == homonym
        assert "Berkeley" not in index

    def test_get_stats(self, graph, people, stanford):
        graph.add_fact(Fact(people["julie"], stanford, "per:employee_or_member_of"))
        stats = graph.get_stats()
        assert stats["total_entities"] == 3
        assert stats["total_facts"] == 1
        assert stats["entity_types"] == ["ORGANIZATION", "PERSON"]
        assert stats["relation_types"] == ["per:employee_or_member_of"]


class TestGraphStore:
    """Test loading and saving graphs."""

    def test_save_and_load(self, tmp_path, people, canada, stanford):
        graph = EntityGraph()
        graph.add_vertex(people["percy"])
        graph.add(people["julie"], canada, Fact(people["julie"], canada, "per:country_of_birth", 0.8))
        graph.add(people["julie"], stanford, Fact(people["julie"], stanford, "per:employee_or_member_of"))

        path = tmp_path / "graphs" / "graph.json"
        GraphStore(path).save(graph)
        loaded = load_graph(path)

        assert set(loaded.vertices()) == set(graph.vertices())
        assert loaded.facts() == graph.facts()
        assert loaded.edges_between(people["julie"], canada)[0].confidence == 0.8
        assert loaded.edges_between(people["julie"], stanford)[0].confidence is None

    def test_unknown_entity_type(self, tmp_path):
        path = tmp_path / "graph.json"
        path.write_text(json.dumps({"entities": [{"name": "Voyager", "type": "SPACECRAFT"}]}))
        with pytest.raises(ValueError, match="SPACECRAFT"):
            load_graph(path)

    def test_fact_missing_relation(self, tmp_path):
        path = tmp_path / "graph.json"
        path.write_text(json.dumps({"facts": [{
            "source": {"name": "Julie", "type": "PERSON"},
            "target": {"name": "Canada", "type": "COUNTRY"},
        }]}))
        with pytest.raises(ValueError, match="relation"):
            load_graph(path)


class TestKnowledgeBase:
    """Test Knowledge Base functionality."""

    def test_add_and_lookup(self, people):
        kb = KnowledgeBase()
        fact = KnownFact(people["julie"], "per:country_of_birth", "Canada")
        kb.add(fact)
        kb.add(fact)

        assert people["julie"] in kb
        assert people["arun"] not in kb
        assert kb.facts_for(people["julie"]) == [fact]
        assert kb.facts_for(people["arun"]) == []
        assert kb.get_stats()["total_facts"] == 1

    def test_export_and_load(self, tmp_path, people):
        kb = KnowledgeBase([
            KnownFact(people["julie"], "per:country_of_birth", "Canada"),
            KnownFact(people["arun"], "per:country_of_birth", "India"),
        ])
        path = tmp_path / "kb.json"
        kb.export_facts(path)

        loaded = load_knowledge_base(path)
        assert loaded.entities() == [people["julie"], people["arun"]]
        assert loaded.all_facts() == kb.all_facts()
