"""
Keyword index boundary.

Exports:
  - BM25KeywordIndex: In-process BM25 KeywordIndex with highlighting
"""

from lawsearch.boundary.keyword.bm25_index import BM25KeywordIndex

__all__ = ["BM25KeywordIndex"]
