"""Domain layer for homeledger.

Services live in their own modules (``homeledger.domain.account`` and so on)
and are imported from there; this package stays import-light so the database
layer can load the entities without pulling the services in.
"""
