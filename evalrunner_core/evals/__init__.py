"""
Scoring and orchestration for eval runs.

Modules:
  - similarity:  cosine similarity between embedding vectors
  - scorer:      weighted ground-truth / criteria similarity with a pass threshold
  - runner:      drives eval cases through the chat backend and the scorer
"""
