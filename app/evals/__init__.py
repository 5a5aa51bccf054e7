"""
Eval run plumbing around the evalrunner core.

Modules:
  - dataset:    eval set loading (JSON array or JSONL)
  - report:     timestamped result reports and run summaries
  - factory:    backend selection from settings
  - providers:  OpenAI, Ollama and sentence-transformers backends
"""
