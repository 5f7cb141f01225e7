"""
Shared fixtures for the inferential path miner tests.
"""

import sys
from pathlib import Path

import pytest

# Add the project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from pathminer.kg.entity_graph import EntityGraph
from pathminer.kg.models import Entity, Fact, NERTag


@pytest.fixture
def people():
    return {
        "julie": Entity("Julie", NERTag.PERSON),
        "arun": Entity("Arun", NERTag.PERSON),
        "gabor": Entity("Gabor", NERTag.PERSON),
        "chris": Entity("Chris", NERTag.PERSON),
        "percy": Entity("Percy", NERTag.PERSON),
    }


@pytest.fixture
def stanford():
    return Entity("Stanford", NERTag.ORGANIZATION)


@pytest.fixture
def canada():
    return Entity("Canada", NERTag.COUNTRY)


@pytest.fixture
def india():
    return Entity("India", NERTag.COUNTRY)


@pytest.fixture
def triangle():
    """X -r1-> Y -r2-> Z -r3-> X."""
    x = Entity("X", NERTag.PERSON)
    y = Entity("Y", NERTag.PERSON)
    z = Entity("Z", NERTag.PERSON)
    facts = [Fact(x, y, "r1"), Fact(y, z, "r2"), Fact(z, x, "r3")]
    return EntityGraph.from_facts(facts), (x, y, z), facts
