"""
Core business logic modules for the HR assistant.

Submodules:
- errors: Pipeline error taxonomy
- retrieval: Hybrid document search
- answering: Context assembly and grounded answer generation
- pipeline: Caller-facing document pipeline operations
"""
