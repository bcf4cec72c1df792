"""
Studies: Structured experiments for understanding.

Each study begins with observation, not hypothesis.

Study progression:
1. Target chase - untrained brains against a moving target
"""
