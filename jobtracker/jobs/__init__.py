"""
Jobs Module - application records consumed by report aggregation.
"""
