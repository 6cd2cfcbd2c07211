"""
Helpers shared by services: text normalization and source row mappers.
"""
