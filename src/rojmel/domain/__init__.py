"""Domain layer for rojmel: entities, ledger arithmetic and services.

Services are imported from their own modules (``rojmel.domain.party`` and
so on) so that the database layer can depend on ``rojmel.domain.entities``
without pulling the services in.
"""
