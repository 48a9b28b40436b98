"""
Team roster service: coach-owned teams stored in an ordered key-value map.
"""
