"""
Inferential Path Miner

Mines short inferential paths from entity graphs extracted by relation
classifiers, abstracts them into logical patterns and counts how often
each pattern occurs.
"""

__version__ = "1.0.0"
