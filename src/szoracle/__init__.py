"""
szoracle: Test oracle for entity-resolution SDKs.

Generates combinatorial matrices of operation inputs and validates the
graph-shaped results (entity paths and networks) an SDK returns against
partially specified expectations.
"""

__version__ = "0.1.0"
