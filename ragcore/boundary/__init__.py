"""
Boundary layer: persistence, embedding providers, and ACL collaborators.
"""
