"""
Core domain logic: segmentation, embedding batching, fusion, boosting
and version lineage. Depends on collaborators only through
lawsearch.core.interfaces.
"""
