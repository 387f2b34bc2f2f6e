"""Domain layer for duetrack application.

Services are imported from their modules (``duetrack.domain.payment`` and
friends) rather than re-exported here, so that the persistence layer can
import entities without pulling in the services that depend on it.
"""
