"""
Core module for shared configuration, schemas, and utilities.

This module provides foundational components used across the application:
- Configuration management
- Pydantic schemas for data validation
- Retry with backoff for external calls
"""
