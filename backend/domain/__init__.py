"""Domain layer for the account service.

Business rules, entities and ports, decoupled from the HTTP surface
and from the storage infrastructure.
"""
