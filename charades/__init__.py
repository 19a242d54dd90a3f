"""
Charades - a two-team word-guessing party game.
"""
