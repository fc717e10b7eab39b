"""
Job search tracker - custom report pipeline.
"""
