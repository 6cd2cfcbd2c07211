"""
External collaborators: the back-office REST API and the toast surface.
"""
