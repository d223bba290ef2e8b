"""
CodeCompass search: adaptive query refinement over a Qdrant code index.

Subpackages:
- core: configuration, schemas, retry helper
- retrieval: keyword extraction, query refinement strategies, search loop
- vectorstore: Qdrant client management
- api: HTTP interface
"""

__version__ = "0.1.0"
