"""
Core utilities: exceptions, logging, validation, paths, seeds and the
auth / clock collaborators.
"""
