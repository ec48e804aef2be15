"""Room domain services: registry, game log, mutations and broadcast.

Everything here operates on in-memory :class:`~lifetracker.models.Room`
objects. Socket handlers own the transport; these modules own the rules.
"""
