"""
repositories/ - Data Access Layer
==================================
Fixed, read-only catalog queries used to describe the database to the client.
Repositories lease a connection per call and always return it.
"""
