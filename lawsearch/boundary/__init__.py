"""
Boundary adapters for persistence, blob storage, text extraction,
embeddings, and the vector and keyword indexes.
"""
