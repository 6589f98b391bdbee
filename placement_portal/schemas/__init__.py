"""
Schemas module - domain records and the API contract.

Everything lives in schemas.py: the same pydantic models describe the
records repositories return and the JSON the API sends and receives.
"""
