"""
HTTP API for the roster and wellbeing check-ins.
"""
