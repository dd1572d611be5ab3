"""
API Schemas
"""
