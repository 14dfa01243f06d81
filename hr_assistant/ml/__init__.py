"""
Machine learning modules for the HR assistant.

Submodules:
- nlp: Text extraction, preprocessing and document analysis
- embeddings: Embedding providers and the versioned embedding index
- llm: Generation provider client and prompts
"""
