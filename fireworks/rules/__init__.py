"""
Rules - Pure game-rule helpers queried by the reducers.

Each module answers one family of questions (clue tokens, deck, hands, play
stacks, cards, statistics, turns, narration). Import the submodule you need;
nothing is re-exported here so the reducers can import rules lazily.
"""
