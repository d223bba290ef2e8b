"""
API module for HTTP interface.

This module contains the FastAPI application and route definitions
for the CodeCompass search service.

Endpoints:
- Health check
- Search with adaptive query refinement
"""
